"""Dashboard aggregation."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.chat import Conversation
from app.models.learning import Assignment, AssignmentStatus, SubjectProgress
from app.models.user import User
from app.schemas.chat import ConversationResponse
from app.schemas.dashboard import DashboardResponse, DashboardStats
from app.schemas.learning import AssignmentResponse, SubjectProgressResponse
from app.schemas.user import UserDetail


def overall_progress(values: list[int]) -> int:
    """Rounded mean of subject progress percentages (0 when empty)."""
    if not values:
        return 0
    return round(sum(values) / len(values))


def assignment_response(assignment: Assignment) -> AssignmentResponse:
    """Serialize an assignment whose subject is loaded."""
    return AssignmentResponse(
        id=assignment.id,
        student_id=assignment.student_id,
        subject_id=assignment.subject_id,
        subject=assignment.subject.name,
        title=assignment.title,
        description=assignment.description,
        due_date=assignment.due_date,
        status=AssignmentStatus(assignment.status),
        created_at=assignment.created_at,
    )


async def build_dashboard(db: AsyncSession, user: User) -> DashboardResponse:
    """Collect progress, assignments and tutor activity for ``user``."""
    conversation_count = await db.scalar(
        select(func.count(Conversation.id)).where(Conversation.user_id == user.id)
    )
    recent = await db.execute(
        select(Conversation)
        .where(Conversation.user_id == user.id)
        .order_by(Conversation.updated_at.desc())
        .limit(settings.dashboard_conversation_limit)
    )
    recent_conversations = [
        ConversationResponse.model_validate(c) for c in recent.scalars().all()
    ]

    stats = DashboardStats(conversations=conversation_count or 0)
    subjects: list[SubjectProgressResponse] = []
    upcoming: list[AssignmentResponse] = []

    student = user.student_profile
    if student is not None:
        progress_rows = await db.execute(
            select(SubjectProgress)
            .options(selectinload(SubjectProgress.subject))
            .where(SubjectProgress.student_id == student.id)
        )
        subjects = sorted(
            (
                SubjectProgressResponse(
                    subject_id=row.subject_id,
                    name=row.subject.name,
                    color=row.subject.color,
                    progress=row.progress,
                    grade=row.grade,
                )
                for row in progress_rows.scalars().all()
            ),
            key=lambda s: s.name,
        )

        status_counts = await db.execute(
            select(Assignment.status, func.count(Assignment.id))
            .where(Assignment.student_id == student.id)
            .group_by(Assignment.status)
        )
        counts = dict(status_counts.all())

        pending = await db.execute(
            select(Assignment)
            .options(selectinload(Assignment.subject))
            .where(
                Assignment.student_id == student.id,
                Assignment.status != AssignmentStatus.COMPLETED.value,
            )
            .order_by(Assignment.due_date.asc())
            .limit(settings.dashboard_assignment_limit)
        )
        upcoming = [assignment_response(a) for a in pending.scalars().all()]

        stats.active_subjects = len(subjects)
        stats.overall_progress = overall_progress([s.progress for s in subjects])
        stats.completed_assignments = counts.get(AssignmentStatus.COMPLETED.value, 0)
        stats.pending_assignments = sum(
            n for status, n in counts.items() if status != AssignmentStatus.COMPLETED.value
        )

    return DashboardResponse(
        user=UserDetail.model_validate(user),
        stats=stats,
        subjects=subjects,
        upcoming_assignments=upcoming,
        recent_conversations=recent_conversations,
    )
