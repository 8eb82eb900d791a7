"""Subject catalog and progress endpoints."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from app.api.deps import CurrentUser, DbSession
from app.schemas.learning import (
    ProgressUpdate,
    SubjectCreate,
    SubjectProgressResponse,
    SubjectResponse,
)
from app.services import learning

router = APIRouter()


@router.get("", response_model=list[SubjectResponse])
async def list_subjects(db: DbSession, user: CurrentUser) -> list[SubjectResponse]:
    """List the subject catalog."""
    return [SubjectResponse.model_validate(s) for s in await learning.list_subjects(db)]


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_subject(
    payload: SubjectCreate,
    db: DbSession,
    user: CurrentUser,
) -> SubjectResponse:
    """Add a subject to the catalog (teachers and admins)."""
    try:
        subject = await learning.create_subject(db, user, payload.name, payload.color)
    except learning.PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except learning.DuplicateSubjectError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SubjectResponse.model_validate(subject)


@router.put("/{subject_id}/progress", response_model=SubjectProgressResponse)
async def update_progress(
    subject_id: UUID,
    payload: ProgressUpdate,
    db: DbSession,
    user: CurrentUser,
) -> SubjectProgressResponse:
    """Record the calling student's progress in a subject."""
    try:
        row = await learning.set_progress(db, user, subject_id, payload)
    except learning.PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except learning.NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return SubjectProgressResponse(
        subject_id=row.subject_id,
        name=row.subject.name,
        color=row.subject.color,
        progress=row.progress,
        grade=row.grade,
    )
