"""
Core module containing the fundamental object model and base classes.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *
from .identity import IdentityGenerator

__all__ = [
    # Entities
    "PersonInfo",
    "Student",
    "Instructor",
    "CourseCode",
    "Course",
    "CourseBuilder",
    "Enrollment",

    # Interfaces
    "Describable",
    "Searchable",

    # Enums
    "StudentStatus",
    "Semester",
    "Grade",

    # Identity
    "IdentityGenerator",

    # Exceptions
    "CcrmException",
    "ValidationError",
    "ResourceNotFoundError",
    "StudentNotFoundError",
    "CourseNotFoundError",
    "NotEnrolledError",
    "DuplicateEntityError",
    "EnrollmentError",
    "DuplicateEnrollmentError",
    "CreditLimitExceededError",
    "PersistenceError",
    "ConfigurationError",
]
