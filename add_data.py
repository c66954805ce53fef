"""
Script to add sample data to a running CCRM server via the REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py
"""

import json
import os
import sys

import requests


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"
_WARN_CHAR = "⚠" if _console_supports_utf8() else "[WARN]"


def _detect_base_url() -> str:
    """Determine a reachable BASE_URL.

    Priority: environment variable `CCRM_BASE_URL`, then common local ports.
    If nothing responds, fall back to http://127.0.0.1:8000.
    """
    env = os.environ.get("CCRM_BASE_URL")
    if env:
        return env

    candidates = [
        "http://127.0.0.1:8000",
        "http://127.0.0.1:8888",
        "http://localhost:8000",
        "http://localhost:8888",
    ]

    for c in candidates:
        try:
            resp = requests.get(f"{c}/health", timeout=0.5)
            if resp.status_code == 200:
                return c
        except requests.exceptions.RequestException:
            continue

    return candidates[0]


BASE_URL = _detect_base_url()


def _error_message(response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        return response.text
    if isinstance(detail, dict):
        return detail.get("message", str(detail))
    return str(detail)


def check_server():
    """Check if the server is running."""
    try:
        response = requests.get(f"{BASE_URL}/health", timeout=2)
        if response.status_code == 200:
            print(f"{_OK_CHAR} Server is running")
            return True
    except requests.exceptions.RequestException:
        pass
    print(f"{_FAIL_CHAR} Server is not running!")
    print("\nPlease start the server first:")
    print("  python -m ccrm.main --port 8000")
    return False


def create_student(full_name, email):
    """Create a new student; the server assigns the registration number."""
    try:
        response = requests.post(f"{BASE_URL}/students", json={"full_name": full_name, "email": email})
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error creating student: {e}")
        return None
    if response.status_code == 201:
        student = response.json()
        print(f"{_OK_CHAR} Created student: {full_name} ({student['reg_no']})")
        return student
    print(f"{_FAIL_CHAR} Failed to create student: {_error_message(response)}")
    return None


def create_course(code, title, credits, instructor, semester, department):
    """Create a new course."""
    data = {
        "code": code,
        "title": title,
        "credits": credits,
        "instructor": instructor,
        "semester": semester,
        "department": department
    }
    try:
        response = requests.post(f"{BASE_URL}/courses", json=data)
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error creating course: {e}")
        return None
    if response.status_code == 201:
        print(f"{_OK_CHAR} Created course: {code} - {title}")
        return response.json()
    print(f"{_FAIL_CHAR} Failed to create course: {_error_message(response)}")
    return None


def enroll_student(reg_no, course_code):
    """Enroll a student in a course."""
    try:
        response = requests.post(f"{BASE_URL}/enrollments", json={"reg_no": reg_no, "course_code": course_code})
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error enrolling student: {e}")
        return None
    if response.status_code == 201:
        print(f"{_OK_CHAR} Enrolled {reg_no} in {course_code}")
        return response.json()
    if response.status_code in (409, 422):
        print(f"{_WARN_CHAR} {reg_no} -> {course_code} rejected: {_error_message(response)}")
    else:
        print(f"{_FAIL_CHAR} Failed to enroll student: {_error_message(response)}")
    return None


def assign_grade(reg_no, course_code, grade):
    """Assign a grade to an existing enrollment."""
    data = {"reg_no": reg_no, "course_code": course_code, "grade": grade}
    try:
        response = requests.put(f"{BASE_URL}/enrollments/grade", json=data)
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error assigning grade: {e}")
        return None
    if response.status_code == 200:
        print(f"{_OK_CHAR} Graded {reg_no} in {course_code}: {grade}")
        return response.json()
    print(f"{_FAIL_CHAR} Failed to assign grade: {_error_message(response)}")
    return None


def list_students():
    """List all students."""
    try:
        response = requests.get(f"{BASE_URL}/students", params={"sort_by_name": True})
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error listing students: {e}")
        return []
    if response.status_code != 200:
        print(f"{_FAIL_CHAR} Failed to list students: {_error_message(response)}")
        return []
    students = response.json()
    print(f"\n{'='*60}")
    print(f"Students ({len(students)})")
    print(f"{'='*60}")
    for student in students:
        print(f"  {student['reg_no']:8} | {student['full_name']:20} | GPA {student['gpa']:5.2f} | {student['email']}")
    return students


def show_top_students(n=3):
    """Print the top n students by GPA."""
    try:
        response = requests.get(f"{BASE_URL}/reports/top-students", params={"n": n})
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error getting ranking: {e}")
        return []
    if response.status_code != 200:
        print(f"{_FAIL_CHAR} Failed to get ranking: {_error_message(response)}")
        return []
    ranking = response.json()
    print(f"\n{'='*60}")
    print(f"Top {n} Students")
    print(f"{'='*60}")
    for rank, entry in enumerate(ranking, 1):
        print(f"  {rank}. {entry['name']:20} {entry['gpa']:.2f}")
    return ranking


def get_statistics():
    """Get system statistics."""
    try:
        response = requests.get(f"{BASE_URL}/statistics")
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error getting statistics: {e}")
        return None
    if response.status_code != 200:
        print(f"{_FAIL_CHAR} Failed to get statistics: {_error_message(response)}")
        return None
    stats = response.json()
    print(f"\n{'='*60}")
    print("System Statistics")
    print(f"{'='*60}")
    print(json.dumps(stats['statistics'], indent=2))
    return stats


def main():
    """Main execution."""
    print("="*60)
    print("CCRM - Data Addition Script")
    print("="*60)
    print()

    if not check_server():
        sys.exit(1)

    print("\nCreating students...")
    students = [
        create_student("Alice Johnson", "alice.johnson@university.edu"),
        create_student("Bob Smith", "bob.smith@university.edu"),
        create_student("Carol Davis", "carol.davis@university.edu"),
        create_student("David Wilson", "david.wilson@university.edu"),
    ]

    print("\nCreating courses...")
    create_course("CS101", "Introduction to Programming", 4, "Dr. Turing", "FALL", "Computer Science")
    create_course("CS201", "Data Structures", 4, "Dr. Turing", "FALL", "Computer Science")
    create_course("MATH101", "Calculus I", 4, "Dr. Noether", "FALL", "Mathematics")
    create_course("ENG101", "English Composition", 3, "Dr. Austen", "SPRING", "English")
    create_course("CAP499", "Capstone Project", 18, "Dr. Hopper", "SPRING", "Computer Science")

    print("\nEnrolling students and assigning grades...")
    plan = {
        0: [("CS101", "A"), ("MATH101", "S")],
        1: [("CS101", "B"), ("ENG101", "C")],
        2: [("CS201", "A"), ("ENG101", "S")],
        3: [("CAP499", "B")],
    }
    for index, entries in plan.items():
        if not students[index]:
            continue
        reg_no = students[index]['reg_no']
        for course_code, grade in entries:
            if enroll_student(reg_no, course_code):
                assign_grade(reg_no, course_code, grade)

    # David is at the 18-credit SPRING cap, this one is rejected
    if students[3]:
        enroll_student(students[3]['reg_no'], "ENG101")

    list_students()
    show_top_students()
    get_statistics()

    print("\n" + "="*60)
    print(f"{_OK_CHAR} Sample data added successfully!")
    print("="*60)
    print("\nYou can now:")
    print(f"  - View API docs: {BASE_URL}/docs")
    print(f"  - Transcript: curl {BASE_URL}/students/STU001/transcript")
    print(f"  - Course stats: curl {BASE_URL}/reports/course-enrollments")
    print()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{_FAIL_CHAR} Interrupted by user")
        sys.exit(1)
