#!/usr/bin/env python3
"""
Demo scenario for the CCRM platform.
"""

import os
import sys
import tempfile

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ccrm.config import AppConfig
from ccrm.core.entities import Course
from ccrm.core.enums import Semester
from ccrm.core.exceptions import CreditLimitExceededError, DuplicateEnrollmentError, NotEnrolledError
from ccrm.main import CcrmPlatform


def run_demo():
    """Run a comprehensive demo of the CCRM platform."""
    print("=" * 60)
    print("CCRM CAMPUS COURSE & RECORDS MANAGER - DEMO")
    print("=" * 60)

    workdir = tempfile.mkdtemp(prefix="ccrm_demo_")
    config = AppConfig(
        data_folder=os.path.join(workdir, "data"),
        backup_folder=os.path.join(workdir, "backups"),
        max_credits_per_semester=18,
    )
    platform = CcrmPlatform(config)

    print("\n1. Creating sample data...")
    platform.create_sample_data()

    print("\n2. Demonstrating enrollment rules...")
    demonstrate_enrollment(platform)

    print("\n3. Demonstrating reports...")
    demonstrate_reports(platform)

    print("\n4. Demonstrating persistence...")
    demonstrate_persistence(platform)

    print("\n" + "=" * 60)
    print("DEMO COMPLETED SUCCESSFULLY!")
    print(f"Files written under {workdir}")
    print("=" * 60)


def demonstrate_enrollment(platform):
    """Demonstrate duplicate, credit-limit and grading rules."""
    enrollments = platform.enrollments

    for reg_no, code in [("STU001", "CS101"), ("STU001", "CS201"), ("STU002", "CS101"),
                         ("STU002", "MA101"), ("STU003", "PH101")]:
        enrollments.enroll_student(reg_no, code)
        print(f"    {reg_no} -> {code}: enrolled")

    print("  Testing duplicate enrollment...")
    try:
        enrollments.enroll_student("stu001", "cs101")
    except DuplicateEnrollmentError as e:
        print(f"    ✓ {e.message}")

    print("  Testing credit limit...")
    platform.courses.create_course(
        capstone_course("CS499", "Capstone", 12, Semester.FALL))
    try:
        enrollments.enroll_student("STU001", "CS499")
    except CreditLimitExceededError as e:
        print(f"    ✓ {e.message}")

    print("  Assigning grades...")
    for reg_no, code, grade in [("STU001", "CS101", "A"), ("STU001", "CS201", "B"),
                                ("STU002", "CS101", "S"), ("STU002", "MA101", "C"),
                                ("STU003", "PH101", "A")]:
        enrollments.assign_grade(reg_no, code, grade)
        print(f"    {reg_no} {code}: {grade}")

    try:
        enrollments.assign_grade("STU003", "CS101", "A")
    except NotEnrolledError as e:
        print(f"    ✓ {e.message}")


def capstone_course(code, title, credits, semester):
    return (Course.builder(code, title).credits(credits).semester(semester)
            .instructor("Dr. Hopper").department("Computer Science"))


def demonstrate_reports(platform):
    """Show transcript and ranking reports."""
    transcripts = platform.transcripts
    print(transcripts.generate_transcript("STU001"))

    print("  GPA distribution:")
    for name, gpa in transcripts.get_gpa_distribution().items():
        print(f"    {name}: {gpa:.2f}")

    print("  Top 2 students:")
    for rank, (name, gpa) in enumerate(transcripts.get_top_n_students(2).items(), 1):
        print(f"    {rank}. {name}: {gpa:.2f}")

    print("  Course enrollment statistics:")
    for title, count in transcripts.get_course_enrollment_stats().items():
        print(f"    {title}: {count}")


def demonstrate_persistence(platform):
    """Export, back up and re-import the registries."""
    paths = platform.import_export.export_all_data()
    print(f"  ✓ Exported {paths['students']} and {paths['courses']}")

    folder = platform.backups.perform_backup()
    print(f"  ✓ Backup created at {folder}")
    print(f"  ✓ Total backup size: {platform.backups.total_backup_size()} bytes")

    counts = platform.import_export.import_all_data()
    print(f"  ✓ Re-imported {counts['students']} students and {counts['courses']} courses")


if __name__ == "__main__":
    run_demo()
