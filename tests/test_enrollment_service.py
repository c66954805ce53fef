"""Tests for the enrollment engine: duplicates, credit caps and grading."""

from __future__ import annotations

import threading

import pytest

from ccrm.config import AppConfig
from ccrm.core.enums import Grade, Semester
from ccrm.core.exceptions import (
    CourseNotFoundError, CreditLimitExceededError, DuplicateEnrollmentError,
    NotEnrolledError, StudentNotFoundError, ValidationError,
)
from ccrm.services import EnrollmentService

from conftest import make_course


@pytest.fixture
def student(student_service):
    return student_service.create_student("Ada Lovelace", "ada@uni.edu")


class TestEnroll:
    def test_enroll_appends_ungraded_enrollment(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        enrollment = enrollment_service.enroll_student("STU001", "CS101")
        assert enrollment.student_reg_no == "STU001"
        assert enrollment.course_code.code == "CS101"
        assert enrollment.grade is None
        assert student.enrollments == [enrollment]

    def test_lookups_are_case_insensitive(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        enrollment = enrollment_service.enroll_student("stu001", "cs101")
        assert enrollment.student_reg_no == "STU001"
        assert enrollment.course_code.code == "CS101"

    def test_duplicate_enrollment_rejected(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        enrollment_service.enroll_student("STU001", "CS101")
        with pytest.raises(DuplicateEnrollmentError):
            enrollment_service.enroll_student("STU001", "cs101")
        assert len(student.enrollments) == 1

    def test_unknown_student(self, enrollment_service, course_service):
        course_service.add_course(make_course("CS101"))
        with pytest.raises(StudentNotFoundError):
            enrollment_service.enroll_student("STU404", "CS101")

    def test_unknown_course_leaves_student_untouched(self, enrollment_service, student):
        before = len(student.enrollments)
        with pytest.raises(CourseNotFoundError):
            enrollment_service.enroll_student("STU001", "NOPE1")
        assert len(student.enrollments) == before

    def test_credit_limit_scenario(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("C1", credits=18, semester=Semester.SPRING))
        course_service.add_course(make_course("C2", credits=1, semester=Semester.SPRING))
        enrollment_service.enroll_student("STU001", "C1")
        with pytest.raises(CreditLimitExceededError) as exc_info:
            enrollment_service.enroll_student("STU001", "C2")
        assert exc_info.value.details == {'current_credits': 18, 'course_credits': 1, 'max_credits': 18}
        assert len(student.enrollments) == 1

    def test_exactly_reaching_the_cap_is_allowed(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("C1", credits=10, semester=Semester.FALL))
        course_service.add_course(make_course("C2", credits=8, semester=Semester.FALL))
        enrollment_service.enroll_student("STU001", "C1")
        enrollment_service.enroll_student("STU001", "C2")
        assert enrollment_service.current_credit_load(student, Semester.FALL) == 18

    def test_cap_is_per_semester(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("C1", credits=18, semester=Semester.FALL))
        course_service.add_course(make_course("C2", credits=18, semester=Semester.SPRING))
        enrollment_service.enroll_student("STU001", "C1")
        enrollment_service.enroll_student("STU001", "C2")
        assert len(student.enrollments) == 2

    def test_unresolvable_courses_are_skipped_in_load(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("C1", credits=15, semester=Semester.FALL))
        enrollment_service.enroll_student("STU001", "C1")
        course_service.load_courses([make_course("C2", credits=10, semester=Semester.FALL)])
        assert enrollment_service.current_credit_load(student, Semester.FALL) == 0
        enrollment_service.enroll_student("STU001", "C2")
        assert len(student.enrollments) == 2

    def test_configured_cap_is_used(self, student_service, course_service, student):
        service = EnrollmentService(student_service, course_service, max_credits_per_semester=6)
        course_service.add_course(make_course("C1", credits=4))
        course_service.add_course(make_course("C2", credits=3))
        service.enroll_student("STU001", "C1")
        with pytest.raises(CreditLimitExceededError):
            service.enroll_student("STU001", "C2")

    def test_cap_holds_after_every_enrollment(self, enrollment_service, course_service, student):
        for i, credits in enumerate([5, 4, 6, 3, 2, 1, 4]):
            course_service.add_course(make_course(f"C{i}", credits=credits, semester=Semester.FALL))
        for i in range(7):
            try:
                enrollment_service.enroll_student("STU001", f"C{i}")
            except CreditLimitExceededError:
                pass
            assert enrollment_service.current_credit_load(student, Semester.FALL) <= 18
        assert enrollment_service.current_credit_load(student, Semester.FALL) == 18

    def test_concurrent_enrollment_respects_cap(self, enrollment_service, course_service, student):
        for i in range(12):
            course_service.add_course(make_course(f"C{i}", credits=3, semester=Semester.FALL))
        barrier = threading.Barrier(12)

        def worker(code):
            barrier.wait()
            try:
                enrollment_service.enroll_student("STU001", code)
            except CreditLimitExceededError:
                pass

        threads = [threading.Thread(target=worker, args=(f"C{i}",)) for i in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(student.enrollments) == 6
        assert enrollment_service.current_credit_load(student, Semester.FALL) == 18


class TestAssignGrade:
    def test_assign_and_overwrite(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        enrollment_service.enroll_student("STU001", "CS101")
        enrollment_service.assign_grade("STU001", "cs101", Grade.B)
        enrollment = enrollment_service.assign_grade("STU001", "CS101", "a")
        assert enrollment.grade is Grade.A
        assert student.enrollments[0].grade is Grade.A

    def test_not_enrolled(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        with pytest.raises(NotEnrolledError):
            enrollment_service.assign_grade("STU001", "CS101", Grade.A)
        assert student.enrollments == []

    def test_unknown_student(self, enrollment_service):
        with pytest.raises(StudentNotFoundError):
            enrollment_service.assign_grade("STU404", "CS101", Grade.A)

    def test_invalid_letter(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        enrollment_service.enroll_student("STU001", "CS101")
        with pytest.raises(ValidationError):
            enrollment_service.assign_grade("STU001", "CS101", "Q")
        assert student.enrollments[0].grade is None


class TestEnrollmentQueries:
    def test_get_enrollments_and_statistics(self, enrollment_service, course_service, student):
        course_service.add_course(make_course("CS101"))
        course_service.add_course(make_course("CS102"))
        enrollment_service.enroll_student("STU001", "CS101")
        enrollment_service.enroll_student("STU001", "CS102")
        enrollment_service.assign_grade("STU001", "CS102", Grade.C)

        assert [e.course_code.code for e in enrollment_service.get_enrollments("STU001")] == ["CS101", "CS102"]
        assert enrollment_service.get_statistics() == {
            'total_enrollments': 2,
            'graded_enrollments': 1,
            'max_credits_per_semester': 18,
        }

    def test_get_enrollments_unknown_student(self, enrollment_service):
        with pytest.raises(StudentNotFoundError):
            enrollment_service.get_enrollments("STU404")

    def test_default_cap_comes_from_app_config(self, student_service, course_service):
        service = EnrollmentService(student_service, course_service)
        assert service.max_credits_per_semester == AppConfig().max_credits_per_semester
