"""
Transcript and reporting service.

Every view here is derived and read-only: GPA, transcripts, the GPA
distribution, top-N rankings and per-course enrollment counts.
"""

from collections import Counter
from typing import Dict, List

from ..core.entities import Student
from ..core.exceptions import StudentNotFoundError, ValidationError
from .course_service import CourseService
from .student_service import StudentService

UNKNOWN_COURSE = "Unknown Course"
NOT_GRADED = "Not Graded"

_BANNER = "=" * 40
_RULE = "-" * 66
_ROW_FORMAT = "{:<10} | {:<30} | {:<7} | {:<10}"


class TranscriptService:
    """Service computing GPAs and academic reports."""

    def __init__(self, student_service: StudentService, course_service: CourseService):
        self._student_service = student_service
        self._course_service = course_service

    def calculate_gpa(self, student: Student) -> float:
        """Credit-weighted GPA over graded enrollments.

        Courses that no longer resolve are left out of both sums; a student
        with nothing graded has a GPA of 0.0.
        """
        total_points = 0.0
        total_credits = 0
        for enrollment in student.enrollments:
            if enrollment.grade is None:
                continue
            course = self._course_service.find_by_code(enrollment.course_code.code)
            if course is None:
                continue
            total_points += enrollment.grade.grade_point * course.credits
            total_credits += course.credits

        if total_credits == 0:
            return 0.0
        return total_points / total_credits

    def generate_transcript(self, reg_no: str) -> str:
        """Render a fixed-format transcript for one student."""
        student = self._student_service.find_by_reg_no(reg_no)
        if student is None:
            raise StudentNotFoundError(reg_no)

        lines: List[str] = [
            _BANNER,
            "           ACADEMIC TRANSCRIPT          ",
            _BANNER,
            student.details(),
            "",
        ]

        enrollments = student.enrollments
        if not enrollments:
            lines.append("No courses enrolled.")
        else:
            lines.append(_ROW_FORMAT.format("Code", "Course Title", "Credits", "Grade"))
            lines.append(_RULE)
            for enrollment in enrollments:
                course = self._course_service.find_by_code(enrollment.course_code.code)
                grade = enrollment.grade.name if enrollment.grade else NOT_GRADED
                if course is None:
                    lines.append(_ROW_FORMAT.format(enrollment.course_code.code, UNKNOWN_COURSE, "-", grade))
                else:
                    lines.append(_ROW_FORMAT.format(course.code, course.title, course.credits, grade))

        lines.append("")
        lines.append(f"GPA: {self.calculate_gpa(student):.2f}")
        lines.append(_BANNER)
        return "\n".join(lines) + "\n"

    def get_gpa_distribution(self) -> Dict[str, float]:
        """GPA per student name. Students sharing a name overwrite each other."""
        distribution: Dict[str, float] = {}
        for student in self._student_service.get_all_students():
            distribution[student.full_name] = self.calculate_gpa(student)
        return distribution

    def get_top_n_students(self, n: int) -> Dict[str, float]:
        """The n best students by GPA, highest first.

        Ties keep directory order. If two of the selected students share a
        name, the higher-ranked one is kept.
        """
        if n < 0:
            raise ValidationError("n must not be negative", details={'n': n})

        scored = [(s, self.calculate_gpa(s)) for s in self._student_service.get_all_students()]
        ranked = sorted(scored, key=lambda pair: pair[1], reverse=True)[:n]

        top: Dict[str, float] = {}
        for student, gpa in ranked:
            top.setdefault(student.full_name, gpa)
        return top

    def get_course_enrollment_stats(self) -> Dict[str, int]:
        """Enrollment count per course title, most enrolled first."""
        counts: Counter = Counter()
        for student in self._student_service.get_all_students():
            for enrollment in student.enrollments:
                course = self._course_service.find_by_code(enrollment.course_code.code)
                counts[course.title if course else UNKNOWN_COURSE] += 1

        # sorted() is stable, so equal counts keep first-encountered order
        ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return dict(ordered)
