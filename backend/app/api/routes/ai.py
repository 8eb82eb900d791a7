"""AI tutor endpoints."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import select

from app.api.deps import CurrentUser, DbSession, bearer_scheme, get_current_user
from app.core.config import settings
from app.core.rate_limit import enforce_rate_limit
from app.models.chat import Conversation
from app.schemas.chat import (
    ChatRequest,
    ChatResponse,
    ConversationDetail,
    ConversationList,
    ConversationResponse,
)
from app.services import tutor

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    db: DbSession,
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> ChatResponse:
    """Send a message to the AI tutor and get its reply."""
    if not payload.message or not payload.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is required",
        )

    # Message is validated before authentication
    user = await get_current_user(credentials, db)

    enforce_rate_limit(
        request,
        user_id=str(user.id),
        limit_per_minute=settings.rate_limit_chat_per_minute,
        scope="ai:chat",
    )

    try:
        reply = await tutor.send_message(
            db,
            user,
            payload.message,
            conversation_id=payload.conversation_id,
            subject=payload.subject,
            topic=payload.topic,
        )
    except Exception as e:
        logger.exception(f"AI chat error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get AI response",
        )

    return ChatResponse(
        response=reply.response,
        conversation_id=reply.conversation.id,
        conversation_title=reply.conversation.title,
    )


@router.get("/suggestions")
async def list_suggestions() -> dict[str, list[str]]:
    """Quick prompts offered in an empty chat."""
    return {"suggestions": tutor.QUICK_SUGGESTIONS}


@router.get("/conversations", response_model=ConversationList)
async def list_conversations(
    db: DbSession,
    user: CurrentUser,
    limit: int = Query(20, ge=1, le=100),
) -> ConversationList:
    """List the caller's tutor conversations, most recently active first."""
    result = await db.execute(
        select(Conversation)
        .where(Conversation.user_id == user.id)
        .order_by(Conversation.updated_at.desc())
        .limit(limit)
    )
    return ConversationList(
        data=[ConversationResponse.model_validate(c) for c in result.scalars().all()]
    )


@router.get("/conversations/{conversation_id}", response_model=ConversationDetail)
async def get_conversation(
    conversation_id: UUID,
    db: DbSession,
    user: CurrentUser,
) -> ConversationDetail:
    """Get a conversation with its messages."""
    conversation = await tutor.get_conversation(
        db, conversation_id, user.id, with_messages=True
    )
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")

    return ConversationDetail.model_validate(conversation)


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(
    conversation_id: UUID,
    db: DbSession,
    user: CurrentUser,
) -> dict:
    """Delete a conversation and its messages."""
    conversation = await tutor.get_conversation(
        db, conversation_id, user.id, with_messages=True
    )
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")

    await db.delete(conversation)
    await db.commit()

    return {"status": "deleted"}
