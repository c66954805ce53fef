"""Shared fixtures for the CCRM test suite."""

from __future__ import annotations

import pytest

from ccrm.config import AppConfig
from ccrm.core.entities import Course
from ccrm.core.enums import Semester
from ccrm.core.identity import IdentityGenerator
from ccrm.services import CourseService, EnrollmentService, StudentService, TranscriptService


def make_course(code: str, title: str = None, credits: int = 3,
                semester: Semester = Semester.FALL, instructor: str = "Dr. Turing",
                department: str = "Computer Science") -> Course:
    return (Course.builder(code, title or f"{code} Title")
            .credits(credits)
            .instructor(instructor)
            .semester(semester)
            .department(department)
            .build())


@pytest.fixture
def student_service() -> StudentService:
    return StudentService(IdentityGenerator())


@pytest.fixture
def course_service() -> CourseService:
    return CourseService()


@pytest.fixture
def enrollment_service(student_service, course_service) -> EnrollmentService:
    return EnrollmentService(student_service, course_service, max_credits_per_semester=18)


@pytest.fixture
def transcript_service(student_service, course_service) -> TranscriptService:
    return TranscriptService(student_service, course_service)


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(
        data_folder=str(tmp_path / "data"),
        backup_folder=str(tmp_path / "backups"),
    )
