"""
Core entities for the CCRM platform.

People share a ``PersonInfo`` record by composition; students and
instructors each implement ``Describable``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .enums import Grade, Semester, StudentStatus
from .exceptions import ValidationError
from .interfaces import Describable


def _now() -> datetime:
    return datetime.now()


@dataclass
class PersonInfo:
    """Identity and contact data shared by every person in the system."""
    id: int
    full_name: str
    email: str
    created_at: datetime = field(default_factory=_now)
    modified_at: datetime = field(default_factory=_now)

    def touch(self) -> None:
        self.modified_at = _now()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'full_name': self.full_name,
            'email': self.email,
            'created_at': self.created_at.isoformat(),
            'modified_at': self.modified_at.isoformat(),
        }


class Student(Describable):
    """Student entity with an ordered list of enrollments."""

    def __init__(self, person: PersonInfo, reg_no: str,
                 status: StudentStatus = StudentStatus.ACTIVE):
        if not reg_no or not reg_no.strip():
            raise ValidationError("Registration number cannot be empty")
        self._person = person
        self._reg_no = reg_no
        self._status = status
        self._enrollments: List["Enrollment"] = []

    @property
    def id(self) -> int:
        return self._person.id

    @property
    def reg_no(self) -> str:
        return self._reg_no

    @property
    def full_name(self) -> str:
        return self._person.full_name

    @property
    def email(self) -> str:
        return self._person.email

    @property
    def status(self) -> StudentStatus:
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._person.created_at

    @property
    def modified_at(self) -> datetime:
        return self._person.modified_at

    @property
    def person(self) -> PersonInfo:
        return self._person

    @property
    def enrollments(self) -> List["Enrollment"]:
        """Enrollments in enrollment order. Returns a copy."""
        return list(self._enrollments)

    def add_enrollment(self, enrollment: "Enrollment") -> None:
        """Append an enrollment. Only the enrollment service should call this."""
        self._enrollments.append(enrollment)
        self._person.touch()

    def set_full_name(self, full_name: str) -> None:
        self._person.full_name = full_name
        self._person.touch()

    def set_email(self, email: str) -> None:
        self._person.email = email
        self._person.touch()

    def set_status(self, status: StudentStatus) -> None:
        self._status = status
        self._person.touch()

    def details(self) -> str:
        return (
            "Student Profile:\n"
            f"  RegNo: {self._reg_no}\n"
            f"  Name: {self.full_name}\n"
            f"  Email: {self.email}\n"
            f"  Status: {self._status.value}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        base_dict = self._person.to_dict()
        base_dict.update({
            'reg_no': self._reg_no,
            'status': self._status.value,
            'enrollments': [e.to_dict() for e in self._enrollments],
        })
        return base_dict

    def __str__(self) -> str:
        return f"ID: {self.id}, RegNo: {self._reg_no}, Name: {self.full_name}, Email: {self.email}"

    def __repr__(self) -> str:
        return f"Student(reg_no={self._reg_no}, status={self._status.value})"


class Instructor(Describable):
    """Instructor entity with the course codes they teach."""

    def __init__(self, person: PersonInfo, department: str):
        self._person = person
        self._department = department
        self._courses_taught: List["CourseCode"] = []

    @property
    def id(self) -> int:
        return self._person.id

    @property
    def full_name(self) -> str:
        return self._person.full_name

    @property
    def email(self) -> str:
        return self._person.email

    @property
    def department(self) -> str:
        return self._department

    @property
    def courses_taught(self) -> List["CourseCode"]:
        return list(self._courses_taught)

    def set_department(self, department: str) -> None:
        self._department = department
        self._person.touch()

    def add_course(self, course_code: "CourseCode") -> None:
        """Record a taught course; repeated codes are ignored."""
        if course_code not in self._courses_taught:
            self._courses_taught.append(course_code)
            self._person.touch()

    def details(self) -> str:
        return (
            "Instructor Profile:\n"
            f"  ID: {self.id}\n"
            f"  Name: {self.full_name}\n"
            f"  Department: {self._department}"
        )


@dataclass(frozen=True)
class CourseCode:
    """Immutable course code. Equality is exact; lookups use ``matches``."""
    code: str

    def __post_init__(self):
        if self.code is None or not str(self.code).strip():
            raise ValidationError("Course code cannot be null or empty")

    def matches(self, other: str) -> bool:
        """Case-insensitive comparison against a raw code string."""
        return other is not None and self.code.casefold() == other.casefold()

    def __str__(self) -> str:
        return self.code


class Course:
    """Course offered by the campus. Everything but ``active`` is fixed."""

    def __init__(self, builder: "CourseBuilder"):
        self._course_code = builder._course_code
        self._title = builder._title
        self._credits = builder._credits
        self._instructor = builder._instructor
        self._semester = builder._semester
        self._department = builder._department
        self._active = True

    @staticmethod
    def builder(code: str, title: str) -> "CourseBuilder":
        return CourseBuilder(code, title)

    @property
    def course_code(self) -> CourseCode:
        return self._course_code

    @property
    def code(self) -> str:
        return self._course_code.code

    @property
    def title(self) -> str:
        return self._title

    @property
    def credits(self) -> int:
        return self._credits

    @property
    def instructor(self) -> str:
        return self._instructor

    @property
    def semester(self) -> Optional[Semester]:
        return self._semester

    @property
    def department(self) -> str:
        return self._department

    @property
    def active(self) -> bool:
        return self._active

    def activate(self) -> None:
        self._active = True

    def deactivate(self) -> None:
        self._active = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        return {
            'code': self.code,
            'title': self._title,
            'credits': self._credits,
            'instructor': self._instructor,
            'semester': self._semester.value if self._semester else None,
            'department': self._department,
            'active': self._active,
        }

    def __str__(self) -> str:
        semester = self._semester.value if self._semester else ""
        return (f"{self.code:<10} | {self._title:<30} | {self._credits:<2d} | "
                f"{self._instructor:<20} | {semester:<10} | {self._department:<20}")

    def __repr__(self) -> str:
        return f"Course(code={self.code}, credits={self._credits})"


class CourseBuilder:
    """Staged construction for ``Course``.

    Code and title are collected up front; the rest is optional until
    ``build()``, which validates the record.
    """

    def __init__(self, code: str, title: str):
        self._course_code = CourseCode(code)
        self._title = title
        self._credits: Optional[int] = None
        self._instructor = ""
        self._semester: Optional[Semester] = None
        self._department = ""

    def credits(self, credits: int) -> "CourseBuilder":
        self._credits = credits
        return self

    def instructor(self, instructor: str) -> "CourseBuilder":
        self._instructor = instructor or ""
        return self

    def semester(self, semester: Optional[Semester]) -> "CourseBuilder":
        if isinstance(semester, str):
            semester = Semester.from_string(semester) if semester.strip() else None
        self._semester = semester
        return self

    def department(self, department: str) -> "CourseBuilder":
        self._department = department or ""
        return self

    def build(self) -> Course:
        if self._title is None or not self._title.strip():
            raise ValidationError("Course title cannot be empty",
                                  details={'code': self._course_code.code})
        if (not isinstance(self._credits, int) or isinstance(self._credits, bool)
                or self._credits <= 0):
            raise ValidationError("Course credits must be a positive integer",
                                  details={'code': self._course_code.code, 'credits': self._credits})
        return Course(self)


class Enrollment:
    """Link between one student and one course, with an optional grade."""

    def __init__(self, student_reg_no: str, course_code: CourseCode,
                 enrolled_at: Optional[datetime] = None):
        self._student_reg_no = student_reg_no
        self._course_code = course_code
        self._enrolled_at = enrolled_at or _now()
        self._grade: Optional[Grade] = None

    @property
    def student_reg_no(self) -> str:
        return self._student_reg_no

    @property
    def course_code(self) -> CourseCode:
        return self._course_code

    @property
    def enrolled_at(self) -> datetime:
        return self._enrolled_at

    @property
    def grade(self) -> Optional[Grade]:
        return self._grade

    @grade.setter
    def grade(self, grade: Optional[Grade]) -> None:
        self._grade = grade

    @property
    def is_graded(self) -> bool:
        return self._grade is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'student_reg_no': self._student_reg_no,
            'course_code': self._course_code.code,
            'enrolled_at': self._enrolled_at.isoformat(),
            'grade': self._grade.name if self._grade else None,
        }

    def __str__(self) -> str:
        grade = self._grade.name if self._grade else "Not Graded"
        return f"Course: {self._course_code}, Enrolled: {self._enrolled_at.date()}, Grade: {grade}"
