"""Dashboard endpoint."""

from fastapi import APIRouter

from app.api.deps import CurrentUser, DbSession
from app.schemas.dashboard import DashboardResponse
from app.services.dashboard import build_dashboard

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(db: DbSession, user: CurrentUser) -> DashboardResponse:
    """Subject progress, upcoming assignments and recent tutor activity."""
    return await build_dashboard(db, user)
