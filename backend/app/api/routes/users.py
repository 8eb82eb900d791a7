"""User endpoints."""

from fastapi import APIRouter

from app.api.deps import CurrentUser, DbSession
from app.schemas.user import UserDetail, UserUpdate

router = APIRouter()


@router.get("/me", response_model=UserDetail)
async def get_current_user(current_user: CurrentUser) -> UserDetail:
    """Get current authenticated user."""
    return UserDetail.model_validate(current_user)


@router.patch("/me", response_model=UserDetail)
async def update_current_user(
    update: UserUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> UserDetail:
    """Update current user's contact details."""
    for field, value in update.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(current_user, field, value)

    await db.commit()
    return UserDetail.model_validate(current_user)
