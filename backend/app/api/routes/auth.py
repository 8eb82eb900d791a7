"""Authentication endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from app.api.deps import DbSession
from app.core.config import settings
from app.core.rate_limit import enforce_rate_limit
from app.core.security import create_access_token
from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
)
from app.schemas.user import UserResponse
from app.services.accounts import RegistrationError, authenticate, register_user

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    db: DbSession,
    request: Request,
) -> RegisterResponse:
    """Register a user and its role profile."""
    enforce_rate_limit(
        request,
        user_id=None,
        limit_per_minute=settings.rate_limit_per_minute,
        scope="auth:register",
    )

    try:
        user = await register_user(db, payload)
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.exception(f"Registration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    db: DbSession,
    request: Request,
) -> AuthResponse:
    """Exchange email and password for a JWT access token."""
    enforce_rate_limit(
        request,
        user_id=None,
        limit_per_minute=settings.rate_limit_per_minute,
        scope="auth:login",
    )

    user = await authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    return AuthResponse(
        access_token=create_access_token(str(user.id)),
        token_type="Bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )
