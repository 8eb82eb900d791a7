"""AI tutor conversation service.

Resolves (or opens) a conversation, stores the student's message, asks the
LLM gateway for the tutor's answer with a grade-aware system prompt and
stores the answer.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.chat import Conversation, Message, MessageRole
from app.models.user import User
from app.services.llm_gateway import LLMGateway, get_llm_gateway

logger = logging.getLogger(__name__)

TUTOR_PREAMBLE = (
    "You are an AI tutor for homeschooling students following the Indian open school syllabus.\n"
    "Your goal is to provide personalized, engaging, and educational support to students."
)

TEACHING_GUIDELINES = [
    "Be patient, encouraging, and supportive",
    "Provide clear, step-by-step explanations",
    "Use examples relevant to Indian context when possible",
    "Ask questions to check understanding",
    "Provide practice problems when appropriate",
    "Adapt to the student's pace and understanding level",
    "Be conversational and engaging",
    "Avoid giving direct answers - guide the student to find solutions",
    "Use simple language appropriate for the grade level",
    "Incorporate Indian educational examples and references when relevant",
]

TUTOR_REMINDER = (
    "Remember: You are a tutor, not just an answer provider. "
    "Focus on helping the student learn and understand concepts."
)

QUICK_SUGGESTIONS = [
    "Help me understand this concept",
    "Can you explain with an example?",
    "Give me a practice problem",
    "How does this relate to real life?",
    "Can you simplify this explanation?",
]


class TutorError(Exception):
    """Raised when the tutor could not produce an answer."""


@dataclass
class TutorReply:
    """Outcome of one chat exchange."""

    response: str
    conversation: Conversation


def conversation_title(message: str, length: int | None = None) -> str:
    """Title derived from the opening message: its first characters, with an
    ellipsis appended when the message was cut."""
    length = length or settings.conversation_title_length
    title = message[:length]
    if len(message) > length:
        title += "..."
    return title


def build_system_prompt(
    user: User,
    subject: str | None = None,
    topic: str | None = None,
) -> str:
    """Build the tutor's system prompt for ``user``.

    The user's student profile, when present, must already be loaded.
    """
    sections = [
        TUTOR_PREAMBLE,
        f"Current user: {user.name}\nUser role: {user.role.value}",
    ]

    if user.student_profile is not None:
        sections.append(
            f"Grade level: {user.student_profile.grade_level.value}\n\n"
            "Please adapt your teaching style and complexity to match this grade level."
        )

    context = []
    if subject:
        context.append(f"Current subject: {subject}")
    if topic:
        context.append(f"Current topic: {topic}")
    if context:
        sections.append("\n".join(context))

    guidelines = "\n".join(
        f"{i}. {line}" for i, line in enumerate(TEACHING_GUIDELINES, 1)
    )
    sections.append(f"Teaching guidelines:\n{guidelines}")
    sections.append(TUTOR_REMINDER)

    return "\n\n".join(sections)


def build_chat_messages(
    system_prompt: str,
    history: list[Message],
    user_message: str,
    history_limit: int | None = None,
) -> list[dict]:
    """Messages array sent to the model: system prompt, prior turns, new message."""
    if history_limit is None:
        history_limit = settings.tutor_history_limit
    if history_limit > 0:
        history = history[-history_limit:]

    messages = [{"role": MessageRole.SYSTEM.value, "content": system_prompt}]
    messages.extend({"role": m.role, "content": m.content} for m in history)
    messages.append({"role": MessageRole.USER.value, "content": user_message})
    return messages


def _parse_uuid(value: str | None) -> uuid.UUID | None:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


async def get_conversation(
    db: AsyncSession,
    conversation_id: uuid.UUID | str | None,
    user_id: uuid.UUID,
    with_messages: bool = False,
) -> Conversation | None:
    """Fetch one of ``user_id``'s conversations; None when missing or foreign."""
    parsed = conversation_id if isinstance(conversation_id, uuid.UUID) else _parse_uuid(conversation_id)
    if parsed is None:
        return None

    query = select(Conversation).where(
        Conversation.id == parsed,
        Conversation.user_id == user_id,
    )
    if with_messages:
        query = query.options(selectinload(Conversation.messages))

    result = await db.execute(query)
    return result.scalar_one_or_none()


async def send_message(
    db: AsyncSession,
    user: User,
    message: str,
    conversation_id: str | None = None,
    subject: str | None = None,
    topic: str | None = None,
    llm: LLMGateway | None = None,
) -> TutorReply:
    """Run one tutor exchange and persist both sides of it.

    An unknown ``conversation_id`` opens a new conversation rather than
    failing. The student's message is committed before the model is called.

    Raises:
        TutorError: the model returned no content
        LLMError: every configured model failed
    """
    conversation = await get_conversation(db, conversation_id, user.id, with_messages=True)

    history: list[Message] = []
    if conversation is None:
        conversation = Conversation(
            user_id=user.id,
            title=conversation_title(message),
            subject=subject,
            topic=topic,
        )
        db.add(conversation)
        await db.flush()
    else:
        history = list(conversation.messages)
        subject = subject or conversation.subject
        topic = topic or conversation.topic

    is_first_exchange = not history

    db.add(
        Message(
            conversation_id=conversation.id,
            role=MessageRole.USER.value,
            content=message,
        )
    )
    conversation.message_count += 1
    await db.commit()

    messages = build_chat_messages(
        build_system_prompt(user, subject=subject, topic=topic),
        history,
        message,
    )

    llm = llm or get_llm_gateway()
    result = await llm.chat(
        messages=messages,
        temperature=settings.tutor_temperature,
        max_tokens=settings.tutor_max_tokens,
    )

    content = result.get("content")
    if not content:
        raise TutorError("No response from AI")

    db.add(
        Message(
            conversation_id=conversation.id,
            role=MessageRole.ASSISTANT.value,
            content=content,
            tokens_used=result.get("usage", {}).get("total_tokens") or None,
        )
    )
    conversation.message_count += 1

    if is_first_exchange:
        conversation.title = conversation_title(message)

    await db.commit()

    logger.debug(
        f"Tutor replied in conversation {conversation.id} "
        f"(model={result.get('model')}, history={len(history)})"
    )
    return TutorReply(response=content, conversation=conversation)
