"""Assignment endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from app.api.deps import CurrentUser, DbSession
from app.models.learning import AssignmentStatus
from app.schemas.learning import (
    AssignmentCreate,
    AssignmentList,
    AssignmentResponse,
    AssignmentUpdate,
)
from app.services import learning
from app.services.dashboard import assignment_response

router = APIRouter()


def _to_http(e: learning.LearningError) -> HTTPException:
    if isinstance(e, learning.NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, learning.PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=AssignmentList)
async def list_assignments(
    db: DbSession,
    user: CurrentUser,
    status_filter: AssignmentStatus | None = Query(None, alias="status"),
) -> AssignmentList:
    """List the calling student's assignments by due date."""
    try:
        assignments = await learning.list_assignments(db, user, status_filter)
    except learning.LearningError as e:
        raise _to_http(e)

    return AssignmentList(data=[assignment_response(a) for a in assignments])


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    payload: AssignmentCreate,
    db: DbSession,
    user: CurrentUser,
) -> AssignmentResponse:
    """Create an assignment."""
    try:
        assignment = await learning.create_assignment(db, user, payload)
    except learning.LearningError as e:
        raise _to_http(e)

    return assignment_response(assignment)


@router.patch("/{assignment_id}", response_model=AssignmentResponse)
async def update_assignment(
    assignment_id: UUID,
    payload: AssignmentUpdate,
    db: DbSession,
    user: CurrentUser,
) -> AssignmentResponse:
    """Update an assignment's status, title, description or due date."""
    try:
        assignment = await learning.update_assignment(db, user, assignment_id, payload)
    except learning.LearningError as e:
        raise _to_http(e)

    return assignment_response(assignment)
