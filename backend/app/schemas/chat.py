"""AI tutor chat schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.chat import MessageRole
from app.schemas.common import BaseSchema, CamelModel


class ChatRequest(CamelModel):
    """Chat request sent by the tutor UI."""

    message: str | None = None
    conversation_id: str | None = None
    subject: str | None = Field(default=None, max_length=255)
    topic: str | None = Field(default=None, max_length=255)


class ChatResponse(CamelModel):
    """Tutor reply."""

    response: str
    conversation_id: UUID
    conversation_title: str


class MessageResponse(BaseSchema):
    """Chat message response."""

    id: UUID
    role: MessageRole
    content: str
    created_at: datetime


class ConversationResponse(BaseSchema):
    """Conversation summary."""

    id: UUID
    title: str
    subject: str | None = None
    topic: str | None = None
    message_count: int = 0
    created_at: datetime
    updated_at: datetime


class ConversationDetail(ConversationResponse):
    """Conversation with its messages."""

    messages: list[MessageResponse] = []


class ConversationList(CamelModel):
    """Conversation listing."""

    data: list[ConversationResponse]
