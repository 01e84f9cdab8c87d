"""
Puff Backend: Session Routes
============================

What:  Log and review consumption sessions under /api/sessions.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from puff.catalog import ConsumptionMethod
from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.session import (
    SessionCreate,
    SessionListResponse,
    SessionResponse,
    SessionUpdate,
)
from puff.services.session_service import session_service

router = APIRouter(
    prefix="/api",
    tags=["Sessions"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "Strain not found", "model": ErrorResponse}},
    summary="Log a session with one of your strains",
)
async def create_session(
    body: SessionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await session_service.create_session(db, user.id, body)


@router.get(
    "/sessions",
    response_model=SessionListResponse,
    summary="List sessions with cursor pagination",
)
async def list_sessions(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100),
    cursor: Optional[str] = Query(default=None),
    sort: str = Query(default="created_at_desc", pattern="^created_at_(desc|asc)$"),
    strain_id: Optional[UUID] = Query(default=None, description="Only sessions with this strain"),
    method: Optional[ConsumptionMethod] = Query(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SessionListResponse:
    result = await session_service.list_sessions(
        db,
        user.id,
        limit=limit,
        cursor=cursor,
        sort=sort,
        strain_id=strain_id,
        method=method.value if method else None,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
)
async def get_session(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await session_service.get_session(db, user.id, session_id)


@router.patch(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
    summary="Record how the session went (mood after, effects)",
)
async def update_session(
    session_id: UUID,
    body: SessionUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SessionResponse:
    return await session_service.update_session(db, user.id, session_id, body)


@router.delete(
    "/sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Session not found", "model": ErrorResponse}},
)
async def delete_session(
    session_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await session_service.delete_session(db, user.id, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
