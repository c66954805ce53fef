"""
Enumerations and constants for the CCRM platform.
"""

from enum import Enum

from .exceptions import ValidationError


class StudentStatus(Enum):
    """Lifecycle status of a student."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"

    @classmethod
    def from_string(cls, value: str) -> "StudentStatus":
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Unknown student status: {value!r}")


class Semester(Enum):
    """Academic semesters."""
    SPRING = "SPRING"
    SUMMER = "SUMMER"
    FALL = "FALL"

    @classmethod
    def from_string(cls, value: str) -> "Semester":
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Unknown semester: {value!r}")


class Grade(Enum):
    """Letter grades with their grade points."""
    S = 10.0  # Outstanding
    A = 9.0   # Excellent
    B = 8.0   # Good
    C = 7.0   # Average
    D = 6.0   # Pass
    E = 5.0
    F = 0.0

    @property
    def grade_point(self) -> float:
        return self.value

    @classmethod
    def from_string(cls, value: str) -> "Grade":
        """Parse a letter grade, ignoring case and surrounding whitespace."""
        try:
            return cls[value.strip().upper()]
        except (KeyError, AttributeError):
            raise ValidationError(f"Unknown grade: {value!r}")
