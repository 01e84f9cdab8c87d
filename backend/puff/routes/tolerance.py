"""
Puff Backend: Tolerance Break Routes
====================================

What:  Start, check and end a tolerance break; the static guide.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.tolerance import ToleranceBreakStart, ToleranceBreakStatus, ToleranceGuide
from puff.services.tolerance_service import tolerance_service

router = APIRouter(
    prefix="/api/tolerance-break",
    tags=["Tolerance Break"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.get("/guide", response_model=ToleranceGuide, summary="Durations, coping tips and timeline")
async def get_guide(user: User = Depends(get_current_user)) -> ToleranceGuide:
    return tolerance_service.get_guide()


@router.post(
    "",
    response_model=ToleranceBreakStatus,
    status_code=status.HTTP_201_CREATED,
    summary="Start a break now (replaces a break in progress)",
)
async def start_break(
    body: ToleranceBreakStart,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ToleranceBreakStatus:
    return await tolerance_service.start_break(db, user.id, body)


@router.get(
    "",
    response_model=ToleranceBreakStatus,
    responses={404: {"description": "No break in progress", "model": ErrorResponse}},
    summary="Progress of the current break",
)
async def get_status(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ToleranceBreakStatus:
    return await tolerance_service.get_status(db, user.id)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "No break in progress", "model": ErrorResponse}},
    summary="End the break early",
)
async def end_break(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await tolerance_service.end_break(db, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
