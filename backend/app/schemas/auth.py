"""Authentication schemas."""

from datetime import date

from pydantic import EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from app.models.profile import GradeLevel
from app.models.user import UserRole
from app.schemas.common import CamelModel
from app.schemas.user import UserResponse


class RegisterRequest(CamelModel):
    """Registration request.

    Role specific fields are optional here; the student grade level rule is
    enforced by the registration service.
    """

    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    role: UserRole
    grade_level: GradeLevel | None = None
    date_of_birth: date | None = None
    phone: str | None = Field(default=None, max_length=32)
    address: str | None = None
    # Teacher
    specialization: str | None = Field(default=None, max_length=255)
    experience: int | None = Field(default=None, ge=0)
    qualification: str | None = Field(default=None, max_length=255)
    # Parent
    occupation: str | None = Field(default=None, max_length=255)

    @field_validator("email", "password", "name", "role", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        """Blank strings count as absent, like an omitted field."""
        if isinstance(value, str) and not value.strip():
            raise PydanticCustomError("missing", "Field required")
        return value


class RegisterResponse(CamelModel):
    """Registration response."""

    message: str = "User registered successfully"
    user: UserResponse


class LoginRequest(CamelModel):
    """Email/password login request."""

    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    """Authentication response with tokens."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserResponse
