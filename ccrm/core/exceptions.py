"""
Custom exceptions for the CCRM platform.
"""

from typing import Optional, Any, Dict


class CcrmException(Exception):
    """Base exception for all CCRM-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(CcrmException):
    """Raised when data validation fails."""
    pass


class ResourceNotFoundError(CcrmException):
    """Raised when a requested resource is not found."""
    pass


class StudentNotFoundError(ResourceNotFoundError):
    """Raised when a registration number does not resolve to a student."""

    def __init__(self, reg_no: str):
        super().__init__(f"Student not found: {reg_no}", error_code="STUDENT_NOT_FOUND",
                         details={"reg_no": reg_no})


class CourseNotFoundError(ResourceNotFoundError):
    """Raised when a course code does not resolve to a course."""

    def __init__(self, course_code: str):
        super().__init__(f"Course not found: {course_code}", error_code="COURSE_NOT_FOUND",
                         details={"course_code": course_code})


class NotEnrolledError(ResourceNotFoundError):
    """Raised when a grade targets a course the student is not enrolled in."""

    def __init__(self, reg_no: str, course_code: str):
        super().__init__(f"Student {reg_no} is not enrolled in course {course_code}",
                         error_code="NOT_ENROLLED",
                         details={"reg_no": reg_no, "course_code": course_code})


class DuplicateEntityError(CcrmException):
    """Raised when attempting to create a duplicate entity."""
    pass


class EnrollmentError(CcrmException):
    """Raised when enrollment operations fail."""
    pass


class DuplicateEnrollmentError(EnrollmentError):
    """Raised when a student is already enrolled in the course."""

    def __init__(self, reg_no: str, course_code: str):
        super().__init__(f"Student {reg_no} is already enrolled in course {course_code}",
                         error_code="DUPLICATE_ENROLLMENT",
                         details={"reg_no": reg_no, "course_code": course_code})


class CreditLimitExceededError(EnrollmentError):
    """Raised when an enrollment would push the semester load over the cap."""

    def __init__(self, current_credits: int, course_credits: int, max_credits: int):
        super().__init__(
            f"Enrollment failed: exceeds max credit limit of {max_credits} for the semester "
            f"({current_credits} enrolled + {course_credits} requested)",
            error_code="CREDIT_LIMIT_EXCEEDED",
            details={
                "current_credits": current_credits,
                "course_credits": course_credits,
                "max_credits": max_credits,
            })


class PersistenceError(CcrmException):
    """Raised when persistence operations fail."""
    pass


class ConfigurationError(CcrmException):
    """Raised when configuration is invalid."""
    pass
