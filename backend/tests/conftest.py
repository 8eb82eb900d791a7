"""Shared fixtures: isolated SQLite database, HTTP client and a fake LLM."""

import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ALLOW_USER_ID_TOKENS", "true")

from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock, patch  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import app.models  # noqa: E402,F401
from app.core.database import Base, get_db  # noqa: E402
from app.core.rate_limit import reset_rate_limits  # noqa: E402
from main import app  # noqa: E402


@pytest_asyncio.fixture
async def session_maker(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory bound to a fresh SQLite database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """A session for arranging and inspecting rows directly."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app with ``get_db`` bound to the test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    reset_rate_limits()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def fake_llm():
    """Replace the LLM gateway used by the tutor with a mock."""
    gateway = MagicMock()
    gateway.chat = AsyncMock(
        return_value={
            "content": "Let's work through it together. What do you already know?",
            "model": "openai/gpt-4o-mini",
            "usage": {"prompt_tokens": 120, "completion_tokens": 30, "total_tokens": 150},
        }
    )
    with patch("app.services.tutor.get_llm_gateway", return_value=gateway):
        yield gateway


def student_payload(**overrides) -> dict:
    payload = {
        "email": "asha@example.com",
        "password": "s3cret-pass",
        "name": "Asha Verma",
        "role": "STUDENT",
        "gradeLevel": "SECONDARY_8",
    }
    payload.update(overrides)
    return payload


async def register(client: AsyncClient, **overrides) -> dict:
    """Register through the API and return the user object."""
    response = await client.post("/api/auth/register", json=student_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["user"]


def auth_headers(user_or_token) -> dict[str, str]:
    token = user_or_token["id"] if isinstance(user_or_token, dict) else user_or_token
    return {"Authorization": f"Bearer {token}"}
