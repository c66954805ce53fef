"""
Student directory: owns the set of students and their identities.
"""

import logging
import threading
from typing import Callable, Iterable, List, Optional

from ..core.entities import PersonInfo, Student
from ..core.enums import StudentStatus
from ..core.exceptions import StudentNotFoundError, ValidationError
from ..core.identity import IdentityGenerator
from ..core.interfaces import Searchable
from ..core.validators import is_not_blank, is_valid_email, student_name_key

logger = logging.getLogger(__name__)


class StudentService(Searchable[Student]):
    """In-memory student directory keyed by registration number."""

    def __init__(self, id_generator: Optional[IdentityGenerator] = None):
        self._students: List[Student] = []
        self._id_generator = id_generator or IdentityGenerator()
        self._lock = threading.RLock()

    @property
    def id_generator(self) -> IdentityGenerator:
        return self._id_generator

    def new_person(self, full_name: str, email: str) -> PersonInfo:
        """Allocate a person record with a fresh numeric id."""
        return PersonInfo(id=self._id_generator.next_id(), full_name=full_name, email=email)

    def create_student(self, full_name: str, email: str) -> Student:
        """Create, register and return a new active student."""
        if not is_not_blank(full_name):
            raise ValidationError("Student name cannot be empty")
        if not is_valid_email(email):
            raise ValidationError(f"Invalid email address: {email}", details={'email': email})

        with self._lock:
            student = Student(self.new_person(full_name.strip(), email.strip()),
                              self._id_generator.next_reg_no())
            self._students.append(student)
        logger.info("Created student %s (%s)", student.reg_no, student.full_name)
        return student

    def add_student(self, student: Student) -> None:
        """Add a student without a uniqueness check."""
        with self._lock:
            self._id_generator.reserve_reg_no(student.reg_no)
            self._students.append(student)

    def find_by_reg_no(self, reg_no: str) -> Optional[Student]:
        if reg_no is None:
            return None
        wanted = reg_no.casefold()
        return self.find_first(lambda s: s.reg_no.casefold() == wanted)

    def get_student(self, reg_no: str) -> Student:
        """Like ``find_by_reg_no`` but raises ``StudentNotFoundError`` on a miss."""
        student = self.find_by_reg_no(reg_no)
        if student is None:
            raise StudentNotFoundError(reg_no)
        return student

    def get_all_students(self) -> List[Student]:
        with self._lock:
            return list(self._students)

    def search(self, predicate: Callable[[Student], bool]) -> List[Student]:
        with self._lock:
            return [s for s in self._students if predicate(s)]

    def load_students(self, students: Iterable[Student]) -> None:
        """Replace the whole directory, e.g. after a CSV import."""
        students = list(students)
        with self._lock:
            self._students.clear()
            for student in students:
                self._id_generator.reserve_reg_no(student.reg_no)
                self._students.append(student)
        logger.info("Loaded %d students", len(students))

    def update_student(self, reg_no: str, full_name: Optional[str] = None,
                       email: Optional[str] = None) -> Student:
        """Change a student's name and/or email."""
        student = self.get_student(reg_no)
        if full_name is not None:
            if not is_not_blank(full_name):
                raise ValidationError("Student name cannot be empty")
            student.set_full_name(full_name.strip())
        if email is not None:
            if not is_valid_email(email):
                raise ValidationError(f"Invalid email address: {email}", details={'email': email})
            student.set_email(email.strip())
        return student

    def set_status(self, reg_no: str, status: StudentStatus) -> Student:
        student = self.get_student(reg_no)
        student.set_status(status)
        logger.info("Student %s is now %s", student.reg_no, status.value)
        return student

    def deactivate_student(self, reg_no: str) -> Student:
        return self.set_status(reg_no, StudentStatus.INACTIVE)

    def list_sorted_by_name(self) -> List[Student]:
        return sorted(self.get_all_students(), key=student_name_key)

    def count(self) -> int:
        with self._lock:
            return len(self._students)
