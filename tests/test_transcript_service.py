"""Tests for GPA calculation, transcripts and reports."""

from __future__ import annotations

import pytest

from ccrm.core.enums import Grade, Semester
from ccrm.core.exceptions import StudentNotFoundError, ValidationError

from conftest import make_course


def enroll_graded(enrollment_service, reg_no, code, grade):
    enrollment_service.enroll_student(reg_no, code)
    if grade is not None:
        enrollment_service.assign_grade(reg_no, code, grade)


class TestCalculateGpa:
    def test_no_graded_enrollments_is_zero(self, transcript_service, enrollment_service,
                                           student_service, course_service):
        student = student_service.create_student("Ada", "ada@uni.edu")
        assert transcript_service.calculate_gpa(student) == 0.0
        course_service.add_course(make_course("CS101"))
        enrollment_service.enroll_student("STU001", "CS101")
        assert transcript_service.calculate_gpa(student) == 0.0

    def test_credit_weighted_average(self, transcript_service, enrollment_service,
                                     student_service, course_service):
        student = student_service.create_student("Ada", "ada@uni.edu")
        course_service.add_course(make_course("CS101", credits=3))
        course_service.add_course(make_course("CS102", credits=4))
        enroll_graded(enrollment_service, "STU001", "CS101", Grade.A)
        enroll_graded(enrollment_service, "STU001", "CS102", Grade.B)
        gpa = transcript_service.calculate_gpa(student)
        assert gpa == pytest.approx((9.0 * 3 + 8.0 * 4) / 7)
        assert f"{gpa:.2f}" == "8.43"

    def test_ungraded_enrollments_are_ignored(self, transcript_service, enrollment_service,
                                              student_service, course_service):
        student = student_service.create_student("Ada", "ada@uni.edu")
        course_service.add_course(make_course("CS101", credits=3))
        course_service.add_course(make_course("CS102", credits=4))
        enroll_graded(enrollment_service, "STU001", "CS101", Grade.S)
        enroll_graded(enrollment_service, "STU001", "CS102", None)
        assert transcript_service.calculate_gpa(student) == pytest.approx(10.0)

    def test_unresolvable_courses_are_excluded(self, transcript_service, enrollment_service,
                                               student_service, course_service):
        student = student_service.create_student("Ada", "ada@uni.edu")
        course_service.add_course(make_course("CS101", credits=3))
        course_service.add_course(make_course("CS102", credits=4))
        enroll_graded(enrollment_service, "STU001", "CS101", Grade.F)
        enroll_graded(enrollment_service, "STU001", "CS102", Grade.A)
        course_service.load_courses([make_course("CS102", credits=4)])
        assert transcript_service.calculate_gpa(student) == pytest.approx(9.0)
        course_service.load_courses([])
        assert transcript_service.calculate_gpa(student) == 0.0


class TestTranscript:
    def test_unknown_student(self, transcript_service):
        with pytest.raises(StudentNotFoundError):
            transcript_service.generate_transcript("STU404")

    def test_empty_transcript(self, transcript_service, student_service):
        student_service.create_student("Ada Lovelace", "ada@uni.edu")
        text = transcript_service.generate_transcript("STU001")
        assert "ACADEMIC TRANSCRIPT" in text
        assert "RegNo: STU001" in text
        assert "No courses enrolled." in text
        assert "GPA: 0.00" in text

    def test_rows_in_enrollment_order(self, transcript_service, enrollment_service,
                                      student_service, course_service):
        student_service.create_student("Ada Lovelace", "ada@uni.edu")
        course_service.add_course(make_course("MA101", "Calculus", credits=4))
        course_service.add_course(make_course("CS101", "Programming", credits=3))
        enroll_graded(enrollment_service, "STU001", "MA101", None)
        enroll_graded(enrollment_service, "STU001", "CS101", Grade.A)

        lines = transcript_service.generate_transcript("STU001").splitlines()
        rows = [line for line in lines if line.startswith(("MA101", "CS101"))]
        assert rows[0].split(" | ")[0].strip() == "MA101"
        assert "Calculus" in rows[0] and "Not Graded" in rows[0]
        assert rows[1].split(" | ")[-1].strip() == "A"
        assert "GPA: 9.00" in lines

    def test_unresolvable_course_row(self, transcript_service, enrollment_service,
                                     student_service, course_service):
        student_service.create_student("Ada Lovelace", "ada@uni.edu")
        course_service.add_course(make_course("CS101"))
        enrollment_service.enroll_student("STU001", "CS101")
        course_service.load_courses([])
        text = transcript_service.generate_transcript("STU001")
        assert "Unknown Course" in text


class TestReports:
    @pytest.fixture
    def population(self, student_service, course_service, enrollment_service):
        course_service.add_course(make_course("A3", "Alpha", credits=3))
        course_service.add_course(make_course("B3", "Beta", credits=3))
        course_service.add_course(make_course("C3", "Gamma", credits=3, semester=Semester.SPRING))
        student_service.create_student("Ann", "ann@uni.edu")    # 9.0
        student_service.create_student("Ben", "ben@uni.edu")    # 7.5
        student_service.create_student("Cid", "cid@uni.edu")    # 8.0
        enroll_graded(enrollment_service, "STU001", "A3", Grade.A)
        enroll_graded(enrollment_service, "STU002", "A3", Grade.B)
        enroll_graded(enrollment_service, "STU002", "B3", Grade.C)
        enroll_graded(enrollment_service, "STU003", "C3", Grade.B)
        enroll_graded(enrollment_service, "STU003", "B3", Grade.B)

    def test_gpa_distribution(self, population, transcript_service):
        assert transcript_service.get_gpa_distribution() == pytest.approx(
            {"Ann": 9.0, "Ben": 7.5, "Cid": 8.0})

    def test_distribution_name_collision_last_wins(self, population, transcript_service,
                                                   student_service):
        student_service.create_student("Ann", "ann2@uni.edu")
        distribution = transcript_service.get_gpa_distribution()
        assert distribution["Ann"] == 0.0
        assert len(distribution) == 3

    def test_top_n_ordering(self, population, transcript_service):
        top = transcript_service.get_top_n_students(2)
        assert list(top.items()) == [("Ann", 9.0), ("Cid", 8.0)]

    def test_top_n_larger_than_population(self, population, transcript_service):
        top = transcript_service.get_top_n_students(10)
        assert list(top) == ["Ann", "Cid", "Ben"]

    def test_top_n_ties_keep_directory_order(self, transcript_service, student_service):
        for name in ["Zed", "Amy", "Kim"]:
            student_service.create_student(name, "x@uni.edu")
        assert list(transcript_service.get_top_n_students(3)) == ["Zed", "Amy", "Kim"]

    def test_top_zero_and_negative(self, population, transcript_service):
        assert transcript_service.get_top_n_students(0) == {}
        with pytest.raises(ValidationError):
            transcript_service.get_top_n_students(-1)

    def test_course_enrollment_stats(self, population, transcript_service):
        stats = transcript_service.get_course_enrollment_stats()
        assert list(stats.items()) == [("Alpha", 2), ("Beta", 2), ("Gamma", 1)]

    def test_stats_unknown_course_bucket(self, population, transcript_service, course_service):
        course_service.load_courses([make_course("A3", "Alpha", credits=3)])
        stats = transcript_service.get_course_enrollment_stats()
        assert list(stats.items()) == [("Unknown Course", 3), ("Alpha", 2)]
