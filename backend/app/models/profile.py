"""Role-specific profile models."""

import enum
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.learning import Assignment, SubjectProgress
    from app.models.user import User


class GradeLevel(str, enum.Enum):
    """Open school grade levels."""

    PRIMARY_1 = "PRIMARY_1"
    PRIMARY_2 = "PRIMARY_2"
    PRIMARY_3 = "PRIMARY_3"
    PRIMARY_4 = "PRIMARY_4"
    PRIMARY_5 = "PRIMARY_5"
    SECONDARY_6 = "SECONDARY_6"
    SECONDARY_7 = "SECONDARY_7"
    SECONDARY_8 = "SECONDARY_8"
    SECONDARY_9 = "SECONDARY_9"
    SECONDARY_10 = "SECONDARY_10"
    HIGHER_SECONDARY_11 = "HIGHER_SECONDARY_11"
    HIGHER_SECONDARY_12 = "HIGHER_SECONDARY_12"

    @property
    def label(self) -> str:
        """Human readable form, e.g. ``Higher Secondary 11``."""
        *words, number = self.value.split("_")
        return " ".join(w.capitalize() for w in words) + f" {number}"


class StudentProfile(BaseModel):
    """Student profile."""

    __tablename__ = "students"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    grade_level: Mapped[GradeLevel] = mapped_column(
        Enum(GradeLevel, name="grade_level"),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="student_profile",
    )
    progress: Mapped[list["SubjectProgress"]] = relationship(
        "SubjectProgress",
        back_populates="student",
        cascade="all, delete-orphan",
    )
    assignments: Mapped[list["Assignment"]] = relationship(
        "Assignment",
        back_populates="student",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<StudentProfile {self.grade_level.value}>"


class TeacherProfile(BaseModel):
    """Teacher profile."""

    __tablename__ = "teachers"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    specialization: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    # Years of teaching experience
    experience: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    qualification: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="teacher_profile",
    )


class ParentProfile(BaseModel):
    """Parent profile."""

    __tablename__ = "parents"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    occupation: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="parent_profile",
    )
