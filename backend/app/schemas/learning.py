"""Subject, progress and assignment schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import Field

from app.models.learning import AssignmentStatus
from app.schemas.common import BaseSchema, CamelModel


class SubjectCreate(CamelModel):
    """Subject creation request."""

    name: str = Field(min_length=1, max_length=255)
    color: str | None = Field(default=None, max_length=64)


class SubjectResponse(BaseSchema):
    """Subject response."""

    id: UUID
    name: str
    color: str | None = None


class ProgressUpdate(CamelModel):
    """Progress upsert request."""

    progress: int = Field(ge=0, le=100)
    grade: str | None = Field(default=None, max_length=8)


class SubjectProgressResponse(CamelModel):
    """A student's standing in one subject."""

    subject_id: UUID
    name: str
    color: str | None = None
    progress: int
    grade: str | None = None


class AssignmentCreate(CamelModel):
    """Assignment creation request."""

    subject_id: UUID
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    due_date: date
    # Required unless the caller is the student themself
    student_id: UUID | None = None


class AssignmentUpdate(CamelModel):
    """Assignment update request."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    due_date: date | None = None
    status: AssignmentStatus | None = None


class AssignmentResponse(BaseSchema):
    """Assignment response."""

    id: UUID
    student_id: UUID
    subject_id: UUID
    subject: str
    title: str
    description: str | None = None
    due_date: date
    status: AssignmentStatus
    created_at: datetime


class AssignmentList(CamelModel):
    """Assignment listing."""

    data: list[AssignmentResponse]
