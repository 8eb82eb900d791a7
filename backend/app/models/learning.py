"""Subjects, progress and assignments."""

import enum
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.profile import StudentProfile
    from app.models.user import User


class AssignmentStatus(str, enum.Enum):
    """Assignment workflow status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Subject(BaseModel):
    """A subject in the curriculum catalog."""

    __tablename__ = "subjects"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    # UI accent colour, e.g. "bg-blue-500"
    color: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Subject {self.name}>"


class SubjectProgress(BaseModel):
    """How far a student has progressed in a subject."""

    __tablename__ = "subject_progress"
    __table_args__ = (
        UniqueConstraint("student_id", "subject_id", name="uq_student_subject"),
        CheckConstraint("progress >= 0 AND progress <= 100", name="ck_progress_range"),
    )

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
    )
    progress: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    grade: Mapped[str | None] = mapped_column(
        String(8),
        nullable=True,
    )

    student: Mapped["StudentProfile"] = relationship(
        "StudentProfile",
        back_populates="progress",
    )
    subject: Mapped["Subject"] = relationship("Subject")


class Assignment(BaseModel):
    """Work assigned to a student for a subject."""

    __tablename__ = "assignments"

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    subject_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("subjects.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    due_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    # Stored as plain string, see AssignmentStatus
    status: Mapped[str] = mapped_column(
        String(32),
        default=AssignmentStatus.PENDING.value,
        nullable=False,
    )

    student: Mapped["StudentProfile"] = relationship(
        "StudentProfile",
        back_populates="assignments",
    )
    subject: Mapped["Subject"] = relationship("Subject")
    created_by: Mapped["User | None"] = relationship("User")

    def __repr__(self) -> str:
        return f"<Assignment {self.title}>"
