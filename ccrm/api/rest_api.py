"""
REST API implementation for the CCRM platform using FastAPI.
"""

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..core.entities import Course, Enrollment, Student
from ..core.enums import Semester
from ..core.exceptions import (
    CcrmException, CreditLimitExceededError, DuplicateEnrollmentError,
    DuplicateEntityError, PersistenceError, ResourceNotFoundError,
)
from ..persistence import BackupService, ImportExportService
from ..services import CourseService, EnrollmentService, StudentService, TranscriptService

SEMESTER_PATTERN = r'^(?i:spring|summer|fall)$'


# Pydantic models for API
class StudentCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r'^[^@]+@[^@]+\.[^@]+$')


class StudentUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, pattern=r'^[^@]+@[^@]+\.[^@]+$')


class EnrollmentResponse(BaseModel):
    student_reg_no: str
    course_code: str
    enrolled_at: datetime
    grade: Optional[str] = None


class StudentResponse(BaseModel):
    id: int
    reg_no: str
    full_name: str
    email: str
    status: str
    gpa: float
    enrollments: List[EnrollmentResponse] = []
    created_at: datetime
    modified_at: datetime


class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=200)
    credits: int = Field(..., ge=1, le=30)
    instructor: str = Field("", max_length=100)
    semester: Optional[str] = Field(None, pattern=SEMESTER_PATTERN)
    department: str = Field("", max_length=100)


class CourseResponse(BaseModel):
    code: str
    title: str
    credits: int
    instructor: str
    semester: Optional[str] = None
    department: str
    active: bool


class EnrollmentRequest(BaseModel):
    reg_no: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)


class GradeRequest(BaseModel):
    reg_no: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)
    grade: str = Field(..., pattern=r'^[SABCDEFsabcdef]$')


class TranscriptResponse(BaseModel):
    reg_no: str
    gpa: float
    transcript: str


class RankingEntry(BaseModel):
    name: str
    gpa: float


class CourseCountEntry(BaseModel):
    title: str
    enrollments: int


class ImportRequest(BaseModel):
    source_dir: Optional[str] = None


class OperationResponse(BaseModel):
    success: bool
    message: str
    data: Dict[str, Any] = {}


class StatisticsResponse(BaseModel):
    success: bool
    message: str
    statistics: Dict[str, Any]


class CcrmRestAPI:
    """REST API implementation for the CCRM platform."""

    def __init__(self, student_service: StudentService, course_service: CourseService,
                 enrollment_service: EnrollmentService, transcript_service: TranscriptService,
                 import_export_service: ImportExportService, backup_service: BackupService):
        self._student_service = student_service
        self._course_service = course_service
        self._enrollment_service = enrollment_service
        self._transcript_service = transcript_service
        self._import_export_service = import_export_service
        self._backup_service = backup_service

        self._lock = threading.RLock()

        # Create FastAPI app
        self.app = FastAPI(
            title="CCRM Campus Records API",
            description="Students, courses, enrollments, grades and academic reports",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "CCRM Campus Records API",
                "version": "1.0.0",
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Create a new student with a generated registration number."""
            try:
                with self._lock:
                    student = self._student_service.create_student(student_data.full_name, student_data.email)
                    return self._student_to_response(student)
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(skip: int = 0, limit: int = 100, sort_by_name: bool = False):
            """List all students."""
            with self._lock:
                if sort_by_name:
                    students = self._student_service.list_sorted_by_name()
                else:
                    students = self._student_service.get_all_students()
                students = students[skip:skip + limit]
                return [self._student_to_response(student) for student in students]

        @self.app.get("/students/{reg_no}", response_model=StudentResponse)
        async def get_student(reg_no: str):
            """Get a student by registration number."""
            try:
                with self._lock:
                    return self._student_to_response(self._student_service.get_student(reg_no))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.patch("/students/{reg_no}", response_model=StudentResponse)
        async def update_student(reg_no: str, update: StudentUpdate):
            """Update a student's name and/or email."""
            try:
                with self._lock:
                    student = self._student_service.update_student(
                        reg_no, full_name=update.full_name, email=update.email)
                    return self._student_to_response(student)
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/students/{reg_no}/deactivate", response_model=StudentResponse)
        async def deactivate_student(reg_no: str):
            """Mark a student as inactive."""
            try:
                with self._lock:
                    return self._student_to_response(self._student_service.deactivate_student(reg_no))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/students/{reg_no}/enrollments", response_model=List[EnrollmentResponse])
        async def get_student_enrollments(reg_no: str):
            """Get student enrollments."""
            try:
                with self._lock:
                    enrollments = self._enrollment_service.get_enrollments(reg_no)
                    return [self._enrollment_to_response(e) for e in enrollments]
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/students/{reg_no}/transcript", response_model=TranscriptResponse)
        async def get_transcript(reg_no: str):
            """Render a student's transcript."""
            try:
                with self._lock:
                    transcript = self._transcript_service.generate_transcript(reg_no)
                    student = self._student_service.get_student(reg_no)
                    return TranscriptResponse(
                        reg_no=student.reg_no,
                        gpa=self._transcript_service.calculate_gpa(student),
                        transcript=transcript
                    )
            except CcrmException as e:
                raise self._http_error(e)

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Create a new course."""
            try:
                with self._lock:
                    builder = (Course.builder(course_data.code, course_data.title)
                               .credits(course_data.credits)
                               .instructor(course_data.instructor)
                               .semester(course_data.semester)
                               .department(course_data.department))
                    course = self._course_service.create_course(builder)
                    return self._course_to_response(course)
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(instructor: Optional[str] = None, department: Optional[str] = None,
                               semester: Optional[str] = Query(None, pattern=SEMESTER_PATTERN)):
            """List courses, optionally filtered by instructor, department and semester."""
            with self._lock:
                courses = self._course_service.filter_courses(
                    instructor=instructor,
                    department=department,
                    semester=Semester.from_string(semester) if semester is not None else None
                )
                return [self._course_to_response(course) for course in courses]

        @self.app.get("/courses/{code}", response_model=CourseResponse)
        async def get_course(code: str):
            """Get a course by code."""
            try:
                with self._lock:
                    return self._course_to_response(self._course_service.get_course(code))
            except CcrmException as e:
                raise self._http_error(e)

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
        async def enroll_student(enrollment_data: EnrollmentRequest):
            """Enroll a student in a course."""
            try:
                with self._lock:
                    enrollment = self._enrollment_service.enroll_student(
                        enrollment_data.reg_no, enrollment_data.course_code)
                    return self._enrollment_to_response(enrollment)
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.put("/enrollments/grade", response_model=EnrollmentResponse)
        async def assign_grade(grade_data: GradeRequest):
            """Assign or overwrite a grade."""
            try:
                with self._lock:
                    enrollment = self._enrollment_service.assign_grade(
                        grade_data.reg_no, grade_data.course_code, grade_data.grade)
                    return self._enrollment_to_response(enrollment)
            except CcrmException as e:
                raise self._http_error(e)

        # Report endpoints
        @self.app.get("/reports/gpa-distribution", response_model=Dict[str, float])
        async def gpa_distribution():
            """GPA per student name."""
            with self._lock:
                return self._transcript_service.get_gpa_distribution()

        @self.app.get("/reports/top-students", response_model=List[RankingEntry])
        async def top_students(n: int = Query(5, ge=0)):
            """Top n students by GPA, best first."""
            with self._lock:
                top = self._transcript_service.get_top_n_students(n)
                return [RankingEntry(name=name, gpa=gpa) for name, gpa in top.items()]

        @self.app.get("/reports/course-enrollments", response_model=List[CourseCountEntry])
        async def course_enrollments():
            """Enrollment count per course title, most enrolled first."""
            with self._lock:
                stats = self._transcript_service.get_course_enrollment_stats()
                return [CourseCountEntry(title=title, enrollments=count) for title, count in stats.items()]

        # Data endpoints
        @self.app.post("/data/import", response_model=OperationResponse)
        def import_data(request: Optional[ImportRequest] = None):
            """Replace students and courses with the contents of the CSV files."""
            try:
                with self._lock:
                    source_dir = request.source_dir if request else None
                    counts = self._import_export_service.import_all_data(source_dir)
                    return OperationResponse(
                        success=True,
                        message=f"Imported {counts['students']} students and {counts['courses']} courses",
                        data=counts
                    )
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/data/export", response_model=OperationResponse)
        def export_data():
            """Write students and courses to the CSV files."""
            try:
                with self._lock:
                    paths = self._import_export_service.export_all_data()
                    return OperationResponse(
                        success=True,
                        message="Data exported",
                        data={name: str(path) for name, path in paths.items()}
                    )
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/backups", response_model=OperationResponse, status_code=status.HTTP_201_CREATED)
        def create_backup():
            """Copy the data files into a new timestamped backup folder."""
            try:
                with self._lock:
                    folder = self._backup_service.perform_backup()
                    return OperationResponse(success=True, message="Backup created", data={"path": str(folder)})
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/backups/size", response_model=OperationResponse)
        def backup_size():
            """Total size of all backups."""
            try:
                with self._lock:
                    size = self._backup_service.total_backup_size()
                    return OperationResponse(
                        success=True,
                        message=f"Total backup size: {size} bytes ({size / (1024.0 * 1024.0):.2f} MB)",
                        data={"bytes": size, "backups": len(self._backup_service.list_backups())}
                    )
            except CcrmException as e:
                raise self._http_error(e)

        # Statistics endpoints
        @self.app.get("/statistics", response_model=StatisticsResponse)
        async def get_statistics():
            """Get system statistics."""
            with self._lock:
                statistics = {
                    "students": self._student_service.count(),
                    "courses": self._course_service.count(),
                    "enrollment": self._enrollment_service.get_statistics(),
                }
                return StatisticsResponse(
                    success=True,
                    message="Statistics retrieved successfully",
                    statistics=statistics
                )

    @staticmethod
    def _http_error(error: CcrmException) -> HTTPException:
        """Map a CCRM exception to an HTTP error."""
        if isinstance(error, ResourceNotFoundError):
            code = 404
        elif isinstance(error, (DuplicateEnrollmentError, DuplicateEntityError)):
            code = 409
        elif isinstance(error, CreditLimitExceededError):
            code = 422
        elif isinstance(error, PersistenceError):
            code = 500
        else:
            code = 400
        return HTTPException(status_code=code, detail={
            "message": error.message,
            "error_code": error.error_code,
            "details": error.details,
        })

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(
            id=student.id,
            reg_no=student.reg_no,
            full_name=student.full_name,
            email=student.email,
            status=student.status.value,
            gpa=self._transcript_service.calculate_gpa(student),
            enrollments=[self._enrollment_to_response(e) for e in student.enrollments],
            created_at=student.created_at,
            modified_at=student.modified_at
        )

    @staticmethod
    def _course_to_response(course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            code=course.code,
            title=course.title,
            credits=course.credits,
            instructor=course.instructor,
            semester=course.semester.value if course.semester else None,
            department=course.department,
            active=course.active
        )

    @staticmethod
    def _enrollment_to_response(enrollment: Enrollment) -> EnrollmentResponse:
        return EnrollmentResponse(
            student_reg_no=enrollment.student_reg_no,
            course_code=enrollment.course_code.code,
            enrolled_at=enrollment.enrolled_at,
            grade=enrollment.grade.name if enrollment.grade else None
        )
