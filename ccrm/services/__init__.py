"""
Services module containing the directories and the academic engines.
"""

from .student_service import StudentService
from .course_service import CourseService
from .enrollment_service import EnrollmentService
from .transcript_service import TranscriptService

__all__ = [
    "StudentService",
    "CourseService",
    "EnrollmentService",
    "TranscriptService",
]
