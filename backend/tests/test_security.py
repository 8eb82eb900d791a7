"""Tests for JWT handling, password hashing and bearer-token resolution."""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import HTTPException, status
from jose import jwt

from app.api.deps import get_current_user, resolve_user_id
from app.core.config import settings
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)


def _expired_token(user_id: str) -> str:
    return jwt.encode(
        {
            "sub": user_id,
            "exp": datetime.now(UTC) - timedelta(hours=1),
            "iat": datetime.now(UTC) - timedelta(hours=2),
            "type": "access",
        },
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


class TestJWT:
    """Test JWT creation and verification."""

    def test_create_token_with_custom_expiration(self):
        user_id = str(uuid.uuid4())

        token = create_access_token(subject=user_id, expires_delta=timedelta(hours=1))

        payload = verify_token(token)
        assert payload is not None
        assert payload["sub"] == user_id
        assert payload["type"] == "access"

    def test_expired_token_returns_none(self):
        assert verify_token(_expired_token(str(uuid.uuid4()))) is None

    def test_invalid_token_returns_none(self):
        assert verify_token("invalid.token.here") is None

    def test_tampered_token_returns_none(self):
        token = create_access_token(subject=str(uuid.uuid4()))
        parts = token.split(".")
        parts[1] = parts[1] + "tampered"

        assert verify_token(".".join(parts)) is None

    def test_additional_claims_are_kept(self):
        token = create_access_token(subject="abc", additional_claims={"role": "STUDENT"})
        assert verify_token(token)["role"] == "STUDENT"


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = get_password_hash("hunter22")
        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_verify_roundtrip(self):
        hashed = get_password_hash("hunter22")
        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)


class TestResolveUserId:
    def test_bare_user_id_accepted(self):
        user_id = uuid.uuid4()
        assert resolve_user_id(str(user_id)) == user_id

    def test_access_token_accepted(self):
        user_id = uuid.uuid4()
        assert resolve_user_id(create_access_token(str(user_id))) == user_id

    def test_bare_user_id_rejected_when_disabled(self, monkeypatch):
        monkeypatch.setattr(settings, "allow_user_id_tokens", False)

        with pytest.raises(HTTPException) as exc_info:
            resolve_user_id(str(uuid.uuid4()))

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_garbage_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            resolve_user_id("demo-user")

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Invalid or expired token"


class TestGetCurrentUser:
    """get_current_user dependency with mocked credentials and session."""

    @pytest.mark.asyncio
    async def test_missing_credentials_raises_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=None, db=AsyncMock())

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc_info.value.detail == "Authentication required"

    @pytest.mark.asyncio
    async def test_expired_token_raises_401(self):
        mock_credentials = MagicMock()
        mock_credentials.credentials = _expired_token(str(uuid.uuid4()))

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=mock_credentials, db=AsyncMock())

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Invalid or expired token" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_unknown_user_raises_404(self):
        mock_credentials = MagicMock()
        mock_credentials.credentials = str(uuid.uuid4())

        mock_db = AsyncMock()
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = None
        mock_db.execute.return_value = mock_result

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(credentials=mock_credentials, db=mock_db)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND
        assert exc_info.value.detail == "User not found"

    @pytest.mark.asyncio
    async def test_known_user_returned(self):
        user = MagicMock()
        mock_credentials = MagicMock()
        mock_credentials.credentials = create_access_token(str(uuid.uuid4()))

        mock_db = AsyncMock()
        mock_result = MagicMock()
        mock_result.scalar_one_or_none.return_value = user
        mock_db.execute.return_value = mock_result

        assert await get_current_user(credentials=mock_credentials, db=mock_db) is user
