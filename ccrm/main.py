"""
Main entry point for the CCRM platform.
"""

import argparse
import logging
import sys
from typing import Optional

from .api.rest_api import CcrmRestAPI
from .config import AppConfig
from .core.entities import Course
from .core.enums import Semester
from .core.exceptions import CcrmException
from .core.identity import IdentityGenerator
from .persistence import BackupService, ImportExportService
from .services import CourseService, EnrollmentService, StudentService, TranscriptService


class CcrmPlatform:
    """Main platform class that wires every service from one configuration."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()
        self._student_service = None
        self._course_service = None
        self._enrollment_service = None
        self._transcript_service = None
        self._import_export_service = None
        self._backup_service = None
        self._rest_api = None

        self._initialize_platform()

    def _initialize_platform(self):
        """Initialize the platform with all services."""
        print("Initializing CCRM platform...")

        self._student_service = StudentService(IdentityGenerator())
        self._course_service = CourseService()
        print("✓ Student directory and course catalog initialized")

        self._enrollment_service = EnrollmentService(
            self._student_service,
            self._course_service,
            max_credits_per_semester=self._config.max_credits_per_semester
        )
        self._transcript_service = TranscriptService(self._student_service, self._course_service)
        print(f"✓ Enrollment engine initialized (max {self._config.max_credits_per_semester} credits/semester)")

        self._import_export_service = ImportExportService(
            self._student_service, self._course_service, self._config)
        self._backup_service = BackupService(self._config)
        print(f"✓ Data folder: {self._config.data_path}, backups: {self._config.backup_path}")

        self._rest_api = CcrmRestAPI(
            self._student_service,
            self._course_service,
            self._enrollment_service,
            self._transcript_service,
            self._import_export_service,
            self._backup_service
        )
        print("✓ REST API initialized")

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def students(self) -> StudentService:
        return self._student_service

    @property
    def courses(self) -> CourseService:
        return self._course_service

    @property
    def enrollments(self) -> EnrollmentService:
        return self._enrollment_service

    @property
    def transcripts(self) -> TranscriptService:
        return self._transcript_service

    @property
    def import_export(self) -> ImportExportService:
        return self._import_export_service

    @property
    def backups(self) -> BackupService:
        return self._backup_service

    @property
    def app(self):
        return self._rest_api.app

    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None):
        """Serve the REST API until interrupted."""
        import uvicorn

        host = host or self._config.host
        port = port or self._config.port
        print(f"✓ REST server starting on {host}:{port}")
        print(f"  - API Docs: http://localhost:{port}/docs")
        uvicorn.run(self._rest_api.app, host=host, port=port, log_level=self._config.log_level.lower())

    def create_sample_data(self):
        """Create sample students and courses for demonstration."""
        print("Creating sample data...")

        courses = [
            Course.builder("CS101", "Introduction to Programming").credits(4)
            .instructor("Dr. Turing").semester(Semester.FALL).department("Computer Science"),
            Course.builder("CS201", "Data Structures").credits(4)
            .instructor("Dr. Turing").semester(Semester.FALL).department("Computer Science"),
            Course.builder("MA101", "Calculus I").credits(3)
            .instructor("Dr. Noether").semester(Semester.FALL).department("Mathematics"),
            Course.builder("PH101", "Physics I").credits(3)
            .instructor("Dr. Curie").semester(Semester.SPRING).department("Physics"),
        ]
        for builder in courses:
            self._course_service.create_course(builder)

        for name, email in [("Alice Johnson", "alice@university.edu"),
                            ("Bob Smith", "bob@university.edu"),
                            ("Carol Davis", "carol@university.edu")]:
            self._student_service.create_student(name, email)

        print("✓ Sample data created")

    def run_demo(self):
        """Run a demonstration of the platform."""
        print("Running CCRM platform demonstration...")
        self.create_sample_data()

        print("\n=== Enrollment Demo ===")
        plan = [
            ("STU001", "CS101", "A"), ("STU001", "MA101", "S"),
            ("STU002", "CS101", "B"), ("STU002", "CS201", "C"),
            ("STU003", "PH101", "A"),
        ]
        for reg_no, code, grade in plan:
            self._enrollment_service.enroll_student(reg_no, code)
            self._enrollment_service.assign_grade(reg_no, code, grade)
            print(f"  {reg_no} -> {code}: {grade}")

        try:
            self._enrollment_service.enroll_student("STU001", "CS101")
        except CcrmException as e:
            print(f"  Rejected as expected: {e.message}")

        print()
        print(self._transcript_service.generate_transcript("STU001"))

        print("=== Top Students ===")
        for rank, (name, gpa) in enumerate(self._transcript_service.get_top_n_students(3).items(), 1):
            print(f"  {rank}. {name}: {gpa:.2f}")

        print("\n=== Course Enrollment Statistics ===")
        for title, count in self._transcript_service.get_course_enrollment_stats().items():
            print(f"  {title}: {count}")

        print(f"\nEnrollment Service: {self._enrollment_service.get_statistics()}")
        print("\n✓ Demo completed")


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="CCRM Campus Course & Records Manager")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--import-dir", type=str, help="Import students.csv/courses.csv from this folder")
    parser.add_argument("--export", action="store_true", help="Export data to the data folder")
    parser.add_argument("--backup", action="store_true", help="Back up the data files")
    parser.add_argument("--transcript", type=str, metavar="REGNO", help="Print a student transcript")
    parser.add_argument("--top", type=int, metavar="N", help="Print the top N students by GPA")

    args = parser.parse_args(argv)

    try:
        config = AppConfig.load(args.config) if args.config else AppConfig()
    except CcrmException as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    platform = CcrmPlatform(config)
    one_shot = any([args.demo, args.import_dir, args.export, args.backup,
                    args.transcript, args.top is not None])

    try:
        if args.import_dir:
            counts = platform.import_export.import_all_data(args.import_dir)
            print(f"✓ Imported {counts['students']} students and {counts['courses']} courses")
        if args.demo:
            platform.run_demo()
        if args.transcript:
            print(platform.transcripts.generate_transcript(args.transcript))
        if args.top is not None:
            for name, gpa in platform.transcripts.get_top_n_students(args.top).items():
                print(f"{name}: {gpa:.2f}")
        if args.export:
            paths = platform.import_export.export_all_data()
            print(f"✓ Exported to {paths['students']} and {paths['courses']}")
        if args.backup:
            print(f"✓ Backup created at {platform.backups.perform_backup()}")
        if not one_shot:
            platform.start_rest_server(args.host, args.port)
    except CcrmException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutting down...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
