"""API routes."""

from fastapi import APIRouter

from app.api.routes import (
    ai,
    assignments,
    auth,
    dashboard,
    health,
    subjects,
    users,
)

router = APIRouter()

router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(ai.router, prefix="/ai", tags=["ai"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(subjects.router, prefix="/subjects", tags=["subjects"])
router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
