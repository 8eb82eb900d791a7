"""User schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.models.profile import GradeLevel
from app.models.user import UserRole
from app.schemas.common import BaseSchema, CamelModel


class StudentProfileResponse(BaseSchema):
    """Student profile in user response."""

    id: UUID
    grade_level: GradeLevel


class TeacherProfileResponse(BaseSchema):
    """Teacher profile in user response."""

    id: UUID
    specialization: str | None = None
    experience: int | None = None
    qualification: str | None = None


class ParentProfileResponse(BaseSchema):
    """Parent profile in user response."""

    id: UUID
    occupation: str | None = None


class UserResponse(BaseSchema):
    """User response schema. Never carries the password hash."""

    id: UUID
    email: EmailStr
    name: str
    role: UserRole
    date_of_birth: date | None = None
    phone: str | None = None
    address: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime


class UserDetail(UserResponse):
    """User with role profile."""

    student_profile: StudentProfileResponse | None = None
    teacher_profile: TeacherProfileResponse | None = None
    parent_profile: ParentProfileResponse | None = None


class UserUpdate(CamelModel):
    """User update request."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    address: str | None = None
    date_of_birth: date | None = None
