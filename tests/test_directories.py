"""Tests for the student directory and the course catalog."""

from __future__ import annotations

import pytest

from ccrm.core.entities import Course, PersonInfo, Student
from ccrm.core.enums import Semester, StudentStatus
from ccrm.core.exceptions import (
    CourseNotFoundError, DuplicateEntityError, StudentNotFoundError, ValidationError,
)

from conftest import make_course


class TestStudentService:
    def test_create_assigns_sequential_codes(self, student_service):
        first = student_service.create_student("Ada Lovelace", "ada@uni.edu")
        second = student_service.create_student("Alan Turing", "alan@uni.edu")
        assert (first.reg_no, second.reg_no) == ("STU001", "STU002")
        assert second.id == first.id + 1

    def test_create_validates_input(self, student_service):
        with pytest.raises(ValidationError):
            student_service.create_student("", "ada@uni.edu")
        with pytest.raises(ValidationError):
            student_service.create_student("Ada", "not-an-email")
        assert student_service.count() == 0

    def test_find_is_case_insensitive(self, student_service):
        student = student_service.create_student("Ada Lovelace", "ada@uni.edu")
        assert student_service.find_by_reg_no("stu001") is student
        assert student_service.find_by_reg_no("STU999") is None
        assert student_service.find_by_reg_no(None) is None

    def test_get_student_raises_on_miss(self, student_service):
        with pytest.raises(StudentNotFoundError):
            student_service.get_student("STU404")

    def test_get_all_returns_copy(self, student_service):
        student_service.create_student("Ada Lovelace", "ada@uni.edu")
        students = student_service.get_all_students()
        students.clear()
        assert student_service.count() == 1

    def test_add_student_reserves_code(self, student_service):
        person = student_service.new_person("Imported", "imp@uni.edu")
        student_service.add_student(Student(person, "STU010"))
        created = student_service.create_student("Fresh", "fresh@uni.edu")
        assert created.reg_no == "STU011"

    def test_load_replaces_directory(self, student_service):
        student_service.create_student("Old", "old@uni.edu")
        replacement = [Student(PersonInfo(id=99, full_name="New", email="new@uni.edu"), "STU050")]
        student_service.load_students(replacement)
        assert [s.reg_no for s in student_service.get_all_students()] == ["STU050"]
        assert student_service.find_by_reg_no("STU001") is None

    def test_search_and_find_first(self, student_service):
        student_service.create_student("Ada Lovelace", "ada@uni.edu")
        student_service.create_student("Alan Turing", "alan@uni.edu")
        found = student_service.search(lambda s: s.full_name.startswith("A"))
        assert len(found) == 2
        assert student_service.find_first(lambda s: "Turing" in s.full_name).reg_no == "STU002"
        assert student_service.find_first(lambda s: False) is None

    def test_update_and_deactivate(self, student_service):
        student_service.create_student("Ada Lovelace", "ada@uni.edu")
        updated = student_service.update_student("STU001", full_name="Ada King", email="king@uni.edu")
        assert (updated.full_name, updated.email) == ("Ada King", "king@uni.edu")
        with pytest.raises(ValidationError):
            student_service.update_student("STU001", email="bad")
        assert student_service.deactivate_student("STU001").status is StudentStatus.INACTIVE
        with pytest.raises(StudentNotFoundError):
            student_service.deactivate_student("STU002")

    def test_list_sorted_by_name(self, student_service):
        for name in ["charlie Brown", "Alice Smith", "bob Jones"]:
            student_service.create_student(name, "x@uni.edu")
        assert [s.full_name for s in student_service.list_sorted_by_name()] == [
            "Alice Smith", "bob Jones", "charlie Brown"]


class TestCourseService:
    @pytest.fixture
    def catalog(self, course_service):
        course_service.add_course(make_course("CS101", "Intro", instructor="Dr. Turing",
                                              semester=Semester.FALL, department="Computer Science"))
        course_service.add_course(make_course("MA101", "Calculus", instructor="Dr. Noether",
                                              semester=Semester.SPRING, department="Mathematics"))
        course_service.add_course(make_course("CS201", "Algorithms", instructor="dr. turing",
                                              semester=Semester.SPRING, department="computer science"))
        return course_service

    def test_find_by_code_is_case_insensitive(self, catalog):
        assert catalog.find_by_code("cs101").title == "Intro"
        assert catalog.find_by_code("XX000") is None

    def test_get_course_raises_on_miss(self, catalog):
        with pytest.raises(CourseNotFoundError):
            catalog.get_course("XX000")

    def test_filter_by_instructor(self, catalog):
        assert [c.code for c in catalog.filter_by_instructor("DR. TURING")] == ["CS101", "CS201"]

    def test_filter_by_department(self, catalog):
        assert [c.code for c in catalog.filter_by_department("Computer Science")] == ["CS101", "CS201"]

    def test_filter_by_semester(self, catalog):
        assert [c.code for c in catalog.filter_by_semester(Semester.SPRING)] == ["MA101", "CS201"]
        assert catalog.filter_by_semester(Semester.SUMMER) == []

    def test_filter_courses_combines_filters(self, catalog):
        assert [c.code for c in catalog.filter_courses()] == ["CS101", "MA101", "CS201"]
        assert [c.code for c in catalog.filter_courses(instructor="DR. TURING",
                                                       semester=Semester.SPRING)] == ["CS201"]
        assert [c.code for c in catalog.filter_courses(department="computer SCIENCE",
                                                       instructor="dr. turing")] == ["CS101", "CS201"]
        assert catalog.filter_courses(department="Mathematics", semester=Semester.FALL) == []

    def test_filters_return_fresh_lists(self, catalog):
        catalog.filter_by_semester(Semester.SPRING).clear()
        assert len(catalog.filter_by_semester(Semester.SPRING)) == 2

    def test_create_course_rejects_duplicate_code(self, catalog):
        with pytest.raises(DuplicateEntityError):
            catalog.create_course(Course.builder("cs101", "Again").credits(3))
        assert catalog.count() == 3

    def test_load_and_deactivate(self, catalog):
        catalog.load_courses([make_course("PH101", "Physics")])
        assert [c.code for c in catalog.get_all_courses()] == ["PH101"]
        assert catalog.deactivate_course("ph101").active is False

    def test_sorted_listings(self, catalog):
        assert [c.title for c in catalog.list_sorted_by_title()] == ["Algorithms", "Calculus", "Intro"]
        assert [c.code for c in catalog.list_sorted_by_department()] == ["CS101", "MA101", "CS201"]
