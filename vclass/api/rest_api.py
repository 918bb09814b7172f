"""
REST API over the classroom registry using FastAPI.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..core.entities import Assignment
from ..core.exceptions import (
    AssignmentNotFoundError, ClassroomNotFoundError, ConcurrencyError, DuplicateClassroomError,
    InvalidSubmissionContextError, ValidationError, VClassException
)
from ..services import Registry


logger = logging.getLogger(__name__)


ERROR_STATUS_CODES = {
    DuplicateClassroomError: status.HTTP_409_CONFLICT,
    ClassroomNotFoundError: status.HTTP_404_NOT_FOUND,
    AssignmentNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidSubmissionContextError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConcurrencyError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


# Pydantic models for API
class ClassroomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class ClassroomResponse(BaseModel):
    name: str
    students: List[str] = []
    assignment_count: int = 0


class StudentEnroll(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=100)


class StudentResponse(BaseModel):
    student_id: str
    class_name: str


class AssignmentCreate(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=2000)


class AssignmentResponse(BaseModel):
    id: str
    prompt: str
    submitters: List[str] = []
    created_at: datetime


class SubmissionRequest(BaseModel):
    student_id: str = Field(..., min_length=1, max_length=100)
    prompt: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    success: bool
    message: str


class StatisticsResponse(BaseModel):
    success: bool
    message: str
    statistics: Dict[str, Any]


class ClassroomRestAPI:
    """REST API exposing the registry operations over HTTP."""

    def __init__(self, registry: Registry):
        self._registry = registry

        self.app = FastAPI(
            title="VClass Virtual Classroom API",
            description="In-memory registry of classrooms, students and assignments",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_exception_handler(VClassException, self._handle_domain_error)
        self._setup_routes()

    @staticmethod
    async def _handle_domain_error(request: Request, exc: VClassException) -> JSONResponse:
        status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, exc.error_code)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "error_code": exc.error_code}
        )

    def _setup_routes(self):
        """Setup API routes."""
        registry = self._registry

        @self.app.get("/health", response_model=Dict[str, str])
        def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        @self.app.get("/statistics", response_model=StatisticsResponse)
        def get_statistics():
            """Get registry statistics."""
            return StatisticsResponse(
                success=True,
                message="Statistics retrieved successfully",
                statistics=dict(registry.statistics(), locks=registry.lock_statistics())
            )

        # Classroom endpoints
        @self.app.post("/classrooms", response_model=ClassroomResponse, status_code=status.HTTP_201_CREATED)
        def create_classroom(classroom_data: ClassroomCreate):
            """Create a new classroom."""
            classroom = registry.create_classroom(classroom_data.name)
            return ClassroomResponse(name=classroom.name)

        @self.app.get("/classrooms", response_model=List[str])
        def list_classrooms():
            """List classroom names."""
            return registry.list_classrooms()

        @self.app.delete("/classrooms/{name}", response_model=MessageResponse)
        def remove_classroom(name: str):
            """Remove a classroom and everything in it."""
            registry.remove_classroom(name)
            return MessageResponse(success=True, message=f"Classroom {name} has been removed.")

        # Student endpoints
        @self.app.post("/classrooms/{name}/students", response_model=StudentResponse,
                       status_code=status.HTTP_201_CREATED)
        def enroll_student(name: str, student_data: StudentEnroll):
            """Enroll a student in a classroom."""
            student = registry.enroll_student(student_data.student_id, name)
            return StudentResponse(student_id=student.student_id, class_name=name)

        @self.app.get("/classrooms/{name}/students", response_model=List[str])
        def list_students(name: str):
            """List student ids enrolled in a classroom."""
            return registry.list_students(name)

        # Assignment endpoints
        @self.app.post("/classrooms/{name}/assignments", response_model=AssignmentResponse,
                       status_code=status.HTTP_201_CREATED)
        def schedule_assignment(name: str, assignment_data: AssignmentCreate):
            """Schedule an assignment in a classroom."""
            assignment = registry.schedule_assignment(name, assignment_data.prompt)
            return self._assignment_to_response(assignment)

        @self.app.get("/classrooms/{name}/assignments", response_model=List[AssignmentResponse])
        def list_assignments(name: str):
            """List assignments in scheduling order."""
            return [self._assignment_to_response(a) for a in registry.list_assignments(name)]

        @self.app.post("/classrooms/{name}/submissions", response_model=AssignmentResponse)
        def submit_assignment(name: str, submission: SubmissionRequest):
            """Record a submission against the first assignment with a matching prompt."""
            assignment = registry.submit_assignment(submission.student_id, name, submission.prompt)
            return self._assignment_to_response(assignment)

    def _assignment_to_response(self, assignment: Assignment) -> AssignmentResponse:
        """Convert Assignment entity to response model."""
        return AssignmentResponse(
            id=assignment.id,
            prompt=assignment.prompt,
            submitters=sorted(assignment.submitters),
            created_at=assignment.created_at
        )
