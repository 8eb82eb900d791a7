"""Pydantic schemas for request/response validation."""

from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
)
from app.schemas.chat import (
    ChatRequest,
    ChatResponse,
    ConversationDetail,
    ConversationList,
    ConversationResponse,
    MessageResponse,
)
from app.schemas.dashboard import DashboardResponse, DashboardStats
from app.schemas.learning import (
    AssignmentCreate,
    AssignmentList,
    AssignmentResponse,
    AssignmentUpdate,
    ProgressUpdate,
    SubjectCreate,
    SubjectProgressResponse,
    SubjectResponse,
)
from app.schemas.user import UserDetail, UserResponse, UserUpdate

__all__ = [
    # Auth
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "AuthResponse",
    # User
    "UserResponse",
    "UserDetail",
    "UserUpdate",
    # Chat
    "ChatRequest",
    "ChatResponse",
    "MessageResponse",
    "ConversationResponse",
    "ConversationDetail",
    "ConversationList",
    # Learning
    "SubjectCreate",
    "SubjectResponse",
    "ProgressUpdate",
    "SubjectProgressResponse",
    "AssignmentCreate",
    "AssignmentUpdate",
    "AssignmentResponse",
    "AssignmentList",
    # Dashboard
    "DashboardStats",
    "DashboardResponse",
]
