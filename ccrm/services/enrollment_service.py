"""
Enrollment service: links students to courses under the campus rules.

An enrollment is accepted only when the student and course both resolve,
the student is not already enrolled in the course, and the semester credit
load stays within the configured cap. All checks run before the single
append, under one lock.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Union

from ..config import AppConfig
from ..core.entities import Enrollment, Student
from ..core.enums import Grade, Semester
from ..core.exceptions import (
    CourseNotFoundError, CreditLimitExceededError, DuplicateEnrollmentError,
    NotEnrolledError, StudentNotFoundError,
)
from .course_service import CourseService
from .student_service import StudentService

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for enrolling students and recording their grades."""

    def __init__(self, student_service: StudentService, course_service: CourseService,
                 max_credits_per_semester: Optional[int] = None):
        self._student_service = student_service
        self._course_service = course_service
        if max_credits_per_semester is None:
            max_credits_per_semester = AppConfig.max_credits_per_semester
        self._max_credits = max_credits_per_semester
        self._lock = threading.RLock()

    @property
    def max_credits_per_semester(self) -> int:
        return self._max_credits

    def enroll_student(self, reg_no: str, course_code: str) -> Enrollment:
        """Enroll a student in a course and return the new enrollment."""
        with self._lock:
            student = self._student_service.find_by_reg_no(reg_no)
            if student is None:
                raise StudentNotFoundError(reg_no)
            course = self._course_service.find_by_code(course_code)
            if course is None:
                raise CourseNotFoundError(course_code)

            if any(e.course_code.matches(course.code) for e in student.enrollments):
                logger.warning("Duplicate enrollment rejected: %s in %s", student.reg_no, course.code)
                raise DuplicateEnrollmentError(student.reg_no, course.code)

            current_credits = self.current_credit_load(student, course.semester)
            if current_credits + course.credits > self._max_credits:
                logger.warning(
                    "Credit limit rejected: %s has %d credits in %s, %s adds %d (max %d)",
                    student.reg_no, current_credits,
                    course.semester.value if course.semester else "no semester",
                    course.code, course.credits, self._max_credits)
                raise CreditLimitExceededError(current_credits, course.credits, self._max_credits)

            enrollment = Enrollment(student.reg_no, course.course_code)
            student.add_enrollment(enrollment)

        logger.info("Enrolled %s in %s", student.reg_no, course.code)
        return enrollment

    def assign_grade(self, reg_no: str, course_code: str, grade: Union[Grade, str]) -> Enrollment:
        """Set or overwrite the grade of an existing enrollment."""
        if isinstance(grade, str):
            grade = Grade.from_string(grade)

        with self._lock:
            student = self._student_service.find_by_reg_no(reg_no)
            if student is None:
                raise StudentNotFoundError(reg_no)

            enrollment = self._find_enrollment(student, course_code)
            if enrollment is None:
                raise NotEnrolledError(student.reg_no, course_code)
            enrollment.grade = grade

        logger.info("Assigned grade %s to %s for %s", grade.name, student.reg_no, enrollment.course_code)
        return enrollment

    def current_credit_load(self, student: Student, semester: Optional[Semester]) -> int:
        """Credits the student already carries in the given semester.

        Enrollments whose course no longer resolves are skipped.
        """
        total = 0
        for enrollment in student.enrollments:
            course = self._course_service.find_by_code(enrollment.course_code.code)
            if course is not None and course.semester == semester:
                total += course.credits
        return total

    def get_enrollments(self, reg_no: str) -> List[Enrollment]:
        """Get all enrollments of a student, in enrollment order."""
        student = self._student_service.find_by_reg_no(reg_no)
        if student is None:
            raise StudentNotFoundError(reg_no)
        return student.enrollments

    def _find_enrollment(self, student: Student, course_code: str) -> Optional[Enrollment]:
        for enrollment in student.enrollments:
            if enrollment.course_code.matches(course_code):
                return enrollment
        return None

    def get_statistics(self) -> Dict[str, Any]:
        """Get enrollment statistics."""
        with self._lock:
            enrollments = [e for s in self._student_service.get_all_students() for e in s.enrollments]
            return {
                'total_enrollments': len(enrollments),
                'graded_enrollments': sum(1 for e in enrollments if e.is_graded),
                'max_credits_per_semester': self._max_credits,
            }
