"""
Validation helpers and sort keys shared by the services.
"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,6}$", re.IGNORECASE)


def is_valid_email(email: Optional[str]) -> bool:
    """Check an email address against a conventional pattern."""
    if email is None:
        return False
    return EMAIL_PATTERN.match(email) is not None


def is_not_blank(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def student_name_key(student) -> str:
    return student.full_name.casefold()


def course_title_key(course) -> str:
    return course.title.casefold()


def course_department_title_key(course):
    return (course.department, course.title)
