"""
Puff Backend: Strain Routes
===========================

What:  CRUD for the signed-in user's strains under /api/strains.
How:   Thin handlers: parse query/body, call strain_service, set headers.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from puff.catalog import StrainType
from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.strain import (
    StrainCreate,
    StrainListResponse,
    StrainResponse,
    StrainUpdate,
)
from puff.services.strain_service import strain_service

router = APIRouter(
    prefix="/api",
    tags=["Strains"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)

SORT_PATTERN = "^created_at_(desc|asc)$"


@router.post(
    "/strains",
    response_model=StrainResponse,
    status_code=status.HTTP_201_CREATED,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Add a strain to the collection",
)
async def create_strain(
    body: StrainCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StrainResponse:
    return await strain_service.create_strain(db, user.id, body)


@router.get(
    "/strains",
    response_model=StrainListResponse,
    summary="List strains with cursor pagination",
)
async def list_strains(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100, description="Items per page (max 100)"),
    cursor: Optional[str] = Query(
        default=None,
        description="next_cursor from the previous page. Omit for the first page.",
    ),
    sort: str = Query(default="created_at_desc", pattern=SORT_PATTERN),
    type: Optional[StrainType] = Query(default=None, description="Only strains of this type"),
    favorite: Optional[bool] = Query(default=None, description="Only favorites / non-favorites"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StrainListResponse:
    """
    Example (infinite scroll):
        GET /api/strains?limit=20
        GET /api/strains?limit=20&cursor=<next_cursor>
    """
    result = await strain_service.list_strains(
        db,
        user.id,
        limit=limit,
        cursor=cursor,
        sort=sort,
        strain_type=type.value if type else None,
        favorite=favorite,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/strains/{strain_id}",
    response_model=StrainResponse,
    responses={404: {"description": "Strain not found", "model": ErrorResponse}},
    summary="Get one strain",
)
async def get_strain(
    strain_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StrainResponse:
    return await strain_service.get_strain(db, user.id, strain_id)


@router.patch(
    "/strains/{strain_id}",
    response_model=StrainResponse,
    responses={404: {"description": "Strain not found", "model": ErrorResponse}},
    summary="Update some fields of a strain",
)
async def update_strain(
    strain_id: UUID,
    body: StrainUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StrainResponse:
    return await strain_service.update_strain(db, user.id, strain_id, body)


@router.delete(
    "/strains/{strain_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Strain not found", "model": ErrorResponse}},
    summary="Delete a strain (its sessions are kept)",
)
async def delete_strain(
    strain_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await strain_service.delete_strain(db, user.id, strain_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
