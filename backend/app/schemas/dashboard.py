"""Dashboard schemas."""

from app.schemas.chat import ConversationResponse
from app.schemas.common import CamelModel
from app.schemas.learning import AssignmentResponse, SubjectProgressResponse
from app.schemas.user import UserDetail


class DashboardStats(CamelModel):
    """Headline numbers."""

    active_subjects: int = 0
    overall_progress: int = 0
    pending_assignments: int = 0
    completed_assignments: int = 0
    conversations: int = 0


class DashboardResponse(CamelModel):
    """Everything the landing page shows."""

    user: UserDetail
    stats: DashboardStats
    subjects: list[SubjectProgressResponse] = []
    upcoming_assignments: list[AssignmentResponse] = []
    recent_conversations: list[ConversationResponse] = []
