"""
Puff Backend: Recommendation Routes
===================================

What:  GET /api/recommendations/vibes lists the vibes;
       GET /api/recommendations/{vibe_id} ranks the user's strains for one.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.recommend import RecommendationResponse, VibeResponse
from puff.services.recommendation_service import recommendation_service

router = APIRouter(
    prefix="/api/recommendations",
    tags=["Recommendations"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


# Declared before /{vibe_id} so "vibes" is not read as a vibe id
@router.get("/vibes", response_model=List[VibeResponse], summary="Vibes a user can pick")
async def list_vibes(user: User = Depends(get_current_user)) -> List[VibeResponse]:
    return recommendation_service.list_vibes()


@router.get(
    "/{vibe_id}",
    response_model=RecommendationResponse,
    responses={404: {"description": "Unknown vibe", "model": ErrorResponse}},
    summary="Top 3 of your strains for a vibe",
)
async def recommend(
    vibe_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> RecommendationResponse:
    return await recommendation_service.recommend(db, user.id, vibe_id)
