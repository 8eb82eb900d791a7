"""SQLAlchemy models."""

from app.models.chat import Conversation, Message, MessageRole
from app.models.learning import Assignment, AssignmentStatus, Subject, SubjectProgress
from app.models.profile import GradeLevel, ParentProfile, StudentProfile, TeacherProfile
from app.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "StudentProfile",
    "TeacherProfile",
    "ParentProfile",
    "GradeLevel",
    "Conversation",
    "Message",
    "MessageRole",
    "Subject",
    "SubjectProgress",
    "Assignment",
    "AssignmentStatus",
]
