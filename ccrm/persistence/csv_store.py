"""
CSV import/export for students and courses.
"""

import csv
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..config import AppConfig
from ..core.entities import Course, Student
from ..core.enums import StudentStatus
from ..core.exceptions import PersistenceError, ValidationError
from ..services.course_service import CourseService
from ..services.student_service import StudentService

logger = logging.getLogger(__name__)

STUDENT_HEADER = ["regNo", "fullName", "email", "status"]
COURSE_HEADER = ["code", "title", "credits", "instructor", "semester", "department"]


class CsvParser:
    """Converts CSV rows to entities and back."""

    def __init__(self, student_service: StudentService):
        self._student_service = student_service

    def parse_student(self, row: Sequence[str]) -> Student:
        if len(row) < len(STUDENT_HEADER):
            raise ValidationError(f"Expected {len(STUDENT_HEADER)} student fields, got {len(row)}")
        reg_no, full_name, email, status = (field.strip() for field in row[:4])
        person = self._student_service.new_person(full_name, email)
        return Student(person, reg_no, StudentStatus.from_string(status))

    @staticmethod
    def parse_course(row: Sequence[str]) -> Course:
        if len(row) < len(COURSE_HEADER):
            raise ValidationError(f"Expected {len(COURSE_HEADER)} course fields, got {len(row)}")
        code, title, credits, instructor, semester, department = (field.strip() for field in row[:6])
        try:
            credit_count = int(credits)
        except ValueError:
            raise ValidationError(f"Invalid credit count: {credits!r}")
        return (Course.builder(code, title)
                .credits(credit_count)
                .instructor(instructor)
                .semester(semester)
                .department(department)
                .build())

    @staticmethod
    def student_to_row(student: Student) -> List[str]:
        return [student.reg_no, student.full_name, student.email, student.status.value]

    @staticmethod
    def course_to_row(course: Course) -> List[str]:
        return [
            course.code,
            course.title,
            str(course.credits),
            course.instructor,
            course.semester.value if course.semester else "",
            course.department,
        ]


class ImportExportService:
    """Loads the registries from CSV files and writes them back."""

    def __init__(self, student_service: StudentService, course_service: CourseService,
                 config: Optional[AppConfig] = None):
        self._student_service = student_service
        self._course_service = course_service
        self._config = config or AppConfig()
        self._parser = CsvParser(student_service)

    def import_all_data(self, source_dir=None) -> Dict[str, int]:
        """Import students and courses; returns how many of each were loaded."""
        source = Path(source_dir) if source_dir is not None else self._config.data_path
        return {
            'students': self._import_students(source / self._config.students_csv_name),
            'courses': self._import_courses(source / self._config.courses_csv_name),
        }

    def export_all_data(self) -> Dict[str, Path]:
        """Overwrite both data files with the current registries."""
        try:
            self._config.data_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create data directory {self._config.data_path}: {e}")

        students_file = self._config.students_file
        courses_file = self._config.courses_file
        self._write_rows(students_file, STUDENT_HEADER,
                         [self._parser.student_to_row(s) for s in self._student_service.get_all_students()])
        self._write_rows(courses_file, COURSE_HEADER,
                         [self._parser.course_to_row(c) for c in self._course_service.get_all_courses()])
        return {'students': students_file, 'courses': courses_file}

    def _import_students(self, path: Path) -> int:
        rows = self._read_rows(path)
        if rows is None:
            return 0
        students = []
        for line_num, row in rows:
            try:
                students.append(self._parser.parse_student(row))
            except ValidationError as e:
                logger.warning("Skipping student row %d in %s: %s", line_num, path, e)
        self._student_service.load_students(students)
        logger.info("%d students imported from %s", len(students), path)
        return len(students)

    def _import_courses(self, path: Path) -> int:
        rows = self._read_rows(path)
        if rows is None:
            return 0
        courses = []
        for line_num, row in rows:
            try:
                courses.append(self._parser.parse_course(row))
            except ValidationError as e:
                logger.warning("Skipping course row %d in %s: %s", line_num, path, e)
        self._course_service.load_courses(courses)
        logger.info("%d courses imported from %s", len(courses), path)
        return len(courses)

    @staticmethod
    def _read_rows(path: Path):
        """Read data rows (header skipped) as (line number, fields) pairs.

        Returns None when the file does not exist.
        """
        if not path.exists():
            logger.warning("Import file not found, skipping: %s", path)
            return None
        try:
            with open(path, 'r', newline='', encoding='utf-8') as f:
                reader = csv.reader(f)
                next(reader, None)
                return [(line_num, row) for line_num, row in enumerate(reader, 2) if row]
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise PersistenceError(f"Failed to read {path}: {e}")

    @staticmethod
    def _write_rows(path: Path, header: List[str], rows: List[List[str]]) -> None:
        try:
            with open(path, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f)
                writer.writerow(header)
                writer.writerows(rows)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}")
        logger.info("Exported %d rows to %s", len(rows), path)
