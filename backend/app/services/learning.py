"""Subject catalog, student progress and assignments."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.learning import Assignment, AssignmentStatus, Subject, SubjectProgress
from app.models.profile import StudentProfile
from app.models.user import User, UserRole
from app.schemas.learning import AssignmentCreate, AssignmentUpdate, ProgressUpdate

logger = logging.getLogger(__name__)

# Roles allowed to manage the subject catalog
CATALOG_EDITORS = frozenset([UserRole.TEACHER, UserRole.ADMIN])

DEFAULT_SUBJECTS: list[tuple[str, str]] = [
    ("Mathematics", "bg-blue-500"),
    ("Science", "bg-green-500"),
    ("English", "bg-purple-500"),
    ("Social Studies", "bg-orange-500"),
    ("Hindi", "bg-pink-500"),
]


class LearningError(ValueError):
    """Base error for learning operations."""


class NotFoundError(LearningError):
    """Raised when a subject, student or assignment does not exist."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"{kind} not found")


class PermissionDeniedError(LearningError):
    """Raised when the caller's role does not allow the operation."""


class DuplicateSubjectError(LearningError):
    """Raised when a subject name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Subject '{name}' already exists")


def require_student(user: User) -> StudentProfile:
    """Return the caller's student profile (must be loaded)."""
    if user.student_profile is None:
        raise PermissionDeniedError("Only students can do this")
    return user.student_profile


async def list_subjects(db: AsyncSession) -> list[Subject]:
    result = await db.execute(select(Subject).order_by(Subject.name))
    return list(result.scalars().all())


async def get_subject(db: AsyncSession, subject_id: uuid.UUID) -> Subject:
    subject = await db.get(Subject, subject_id)
    if subject is None:
        raise NotFoundError("Subject")
    return subject


async def create_subject(
    db: AsyncSession,
    user: User,
    name: str,
    color: str | None = None,
) -> Subject:
    if user.role not in CATALOG_EDITORS:
        raise PermissionDeniedError("Only teachers and admins can add subjects")

    name = name.strip()
    existing = await db.execute(select(Subject).where(Subject.name == name))
    if existing.scalar_one_or_none() is not None:
        raise DuplicateSubjectError(name)

    subject = Subject(name=name, color=color)
    db.add(subject)
    await db.commit()
    await db.refresh(subject)
    return subject


async def seed_default_subjects(db: AsyncSession) -> int:
    """Insert the default catalog entries that are missing. Returns the count added."""
    existing = {s.name for s in await list_subjects(db)}
    added = 0
    for name, color in DEFAULT_SUBJECTS:
        if name not in existing:
            db.add(Subject(name=name, color=color))
            added += 1
    await db.commit()
    return added


async def set_progress(
    db: AsyncSession,
    user: User,
    subject_id: uuid.UUID,
    update: ProgressUpdate,
) -> SubjectProgress:
    """Create or update the calling student's progress in a subject."""
    student = require_student(user)
    subject = await get_subject(db, subject_id)

    result = await db.execute(
        select(SubjectProgress).where(
            SubjectProgress.student_id == student.id,
            SubjectProgress.subject_id == subject.id,
        )
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = SubjectProgress(student_id=student.id, subject_id=subject.id)
        db.add(row)

    row.progress = update.progress
    row.grade = update.grade
    await db.commit()
    await db.refresh(row)
    # Loaded for the response
    row.subject = subject
    return row


async def get_assignment(db: AsyncSession, assignment_id: uuid.UUID) -> Assignment:
    result = await db.execute(
        select(Assignment)
        .options(selectinload(Assignment.subject))
        .where(Assignment.id == assignment_id)
    )
    assignment = result.scalar_one_or_none()
    if assignment is None:
        raise NotFoundError("Assignment")
    return assignment


async def list_assignments(
    db: AsyncSession,
    user: User,
    status: AssignmentStatus | None = None,
) -> list[Assignment]:
    student = require_student(user)
    query = (
        select(Assignment)
        .options(selectinload(Assignment.subject))
        .where(Assignment.student_id == student.id)
        .order_by(Assignment.due_date.asc())
    )
    if status is not None:
        query = query.where(Assignment.status == status.value)

    result = await db.execute(query)
    return list(result.scalars().all())


async def create_assignment(
    db: AsyncSession,
    user: User,
    payload: AssignmentCreate,
) -> Assignment:
    """Students assign work to themselves; other roles must name the student."""
    if user.student_profile is not None and payload.student_id in (None, user.student_profile.id):
        student_id = user.student_profile.id
    elif user.role == UserRole.STUDENT:
        raise PermissionDeniedError("Students can only create their own assignments")
    elif payload.student_id is None:
        raise LearningError("studentId is required")
    else:
        student = await db.get(StudentProfile, payload.student_id)
        if student is None:
            raise NotFoundError("Student")
        student_id = student.id

    subject = await get_subject(db, payload.subject_id)

    assignment = Assignment(
        student_id=student_id,
        subject_id=subject.id,
        created_by_id=user.id,
        title=payload.title.strip(),
        description=payload.description,
        due_date=payload.due_date,
        status=AssignmentStatus.PENDING.value,
    )
    db.add(assignment)
    await db.commit()
    await db.refresh(assignment)
    assignment.subject = subject

    logger.info(f"Assignment {assignment.id} created for student {student_id}")
    return assignment


def can_edit_assignment(user: User, assignment: Assignment) -> bool:
    """The owning student or whoever created the assignment."""
    if user.student_profile is not None and assignment.student_id == user.student_profile.id:
        return True
    return assignment.created_by_id == user.id


async def update_assignment(
    db: AsyncSession,
    user: User,
    assignment_id: uuid.UUID,
    payload: AssignmentUpdate,
) -> Assignment:
    assignment = await get_assignment(db, assignment_id)
    # Foreign assignments are reported as missing
    if not can_edit_assignment(user, assignment):
        raise NotFoundError("Assignment")

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "status" in changes:
        changes["status"] = AssignmentStatus(changes["status"]).value
    for field, value in changes.items():
        setattr(assignment, field, value)

    await db.commit()
    return assignment
