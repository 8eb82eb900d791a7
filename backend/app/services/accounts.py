"""Account registration and credential checks."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import get_password_hash, verify_password
from app.models.profile import ParentProfile, StudentProfile, TeacherProfile
from app.models.user import User, UserRole
from app.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


class RegistrationError(ValueError):
    """Raised when a registration request cannot be honoured."""


class DuplicateEmailError(RegistrationError):
    """Raised when the email is already registered."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("User with this email already exists")


class RoleNotAllowedError(RegistrationError):
    """Raised when the requested role cannot be self-registered."""

    def __init__(self, role: UserRole):
        self.role = role
        super().__init__(f"Cannot register with role {role.value}")


class MissingGradeLevelError(RegistrationError):
    """Raised when a student registers without a grade level."""

    def __init__(self):
        super().__init__("Grade level is required for students")


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, payload: RegisterRequest) -> User:
    """Create a user and the profile row matching its role.

    Validation happens before anything is written, so a rejected request
    never leaves a user without its profile behind.

    Raises:
        RoleNotAllowedError: ADMIN while admin registration is closed
        MissingGradeLevelError: student without ``grade_level``
        DuplicateEmailError: email already registered
    """
    if payload.role == UserRole.ADMIN and not settings.allow_admin_registration:
        raise RoleNotAllowedError(payload.role)
    if payload.role == UserRole.STUDENT and payload.grade_level is None:
        raise MissingGradeLevelError()

    email = normalize_email(payload.email)
    if await get_user_by_email(db, email) is not None:
        raise DuplicateEmailError(email)

    user = User(
        email=email,
        password_hash=get_password_hash(payload.password),
        name=payload.name.strip(),
        role=payload.role,
        date_of_birth=payload.date_of_birth,
        phone=payload.phone,
        address=payload.address,
    )
    db.add(user)

    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race against a concurrent registration of the same email
        await db.rollback()
        raise DuplicateEmailError(email) from e

    if payload.role == UserRole.STUDENT:
        db.add(StudentProfile(user_id=user.id, grade_level=payload.grade_level))
    elif payload.role == UserRole.TEACHER:
        db.add(
            TeacherProfile(
                user_id=user.id,
                specialization=payload.specialization,
                experience=payload.experience,
                qualification=payload.qualification,
            )
        )
    elif payload.role == UserRole.PARENT:
        db.add(ParentProfile(user_id=user.id, occupation=payload.occupation))

    await db.commit()
    await db.refresh(user)

    logger.info(f"Registered {payload.role.value.lower()} account {user.id}")
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user when the credentials match, otherwise None."""
    user = await get_user_by_email(db, email)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
