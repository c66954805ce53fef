"""
Course catalog: owns the set of courses and the filters over it.
"""

import logging
import threading
from typing import Callable, Iterable, List, Optional

from ..core.entities import Course, CourseBuilder
from ..core.enums import Semester
from ..core.exceptions import CourseNotFoundError, DuplicateEntityError
from ..core.interfaces import Searchable
from ..core.validators import course_department_title_key, course_title_key

logger = logging.getLogger(__name__)


class CourseService(Searchable[Course]):
    """In-memory course catalog keyed by course code."""

    def __init__(self):
        self._courses: List[Course] = []
        self._lock = threading.RLock()

    def add_course(self, course: Course) -> None:
        """Add a course without a uniqueness check."""
        with self._lock:
            self._courses.append(course)

    def create_course(self, builder: CourseBuilder) -> Course:
        """Build a course and add it, rejecting a code already in the catalog."""
        course = builder.build()
        with self._lock:
            if self.find_by_code(course.code) is not None:
                raise DuplicateEntityError(f"Course already exists: {course.code}",
                                           details={'code': course.code})
            self._courses.append(course)
        logger.info("Created course %s (%s, %d credits)", course.code, course.title, course.credits)
        return course

    def find_by_code(self, code: str) -> Optional[Course]:
        return self.find_first(lambda c: c.course_code.matches(code))

    def get_course(self, code: str) -> Course:
        course = self.find_by_code(code)
        if course is None:
            raise CourseNotFoundError(code)
        return course

    def get_all_courses(self) -> List[Course]:
        with self._lock:
            return list(self._courses)

    def search(self, predicate: Callable[[Course], bool]) -> List[Course]:
        with self._lock:
            return [c for c in self._courses if predicate(c)]

    def filter_by_instructor(self, instructor: str) -> List[Course]:
        wanted = (instructor or "").casefold()
        return self.search(lambda c: c.instructor.casefold() == wanted)

    def filter_by_department(self, department: str) -> List[Course]:
        wanted = (department or "").casefold()
        return self.search(lambda c: c.department.casefold() == wanted)

    def filter_by_semester(self, semester: Semester) -> List[Course]:
        return self.search(lambda c: c.semester == semester)

    def filter_courses(self, instructor: Optional[str] = None, department: Optional[str] = None,
                       semester: Optional[Semester] = None) -> List[Course]:
        """Apply any combination of the three filters in one pass; None skips a filter."""
        checks = []
        if instructor is not None:
            wanted_instructor = instructor.casefold()
            checks.append(lambda c: c.instructor.casefold() == wanted_instructor)
        if department is not None:
            wanted_department = department.casefold()
            checks.append(lambda c: c.department.casefold() == wanted_department)
        if semester is not None:
            checks.append(lambda c: c.semester == semester)
        return self.search(lambda c: all(check(c) for check in checks))

    def load_courses(self, courses: Iterable[Course]) -> None:
        """Replace the whole catalog, e.g. after a CSV import."""
        courses = list(courses)
        with self._lock:
            self._courses.clear()
            self._courses.extend(courses)
        logger.info("Loaded %d courses", len(courses))

    def deactivate_course(self, code: str) -> Course:
        course = self.get_course(code)
        course.deactivate()
        logger.info("Course %s deactivated", course.code)
        return course

    def list_sorted_by_title(self) -> List[Course]:
        return sorted(self.get_all_courses(), key=course_title_key)

    def list_sorted_by_department(self) -> List[Course]:
        return sorted(self.get_all_courses(), key=course_department_title_key)

    def count(self) -> int:
        with self._lock:
            return len(self._courses)
