"""
Puff Backend: Insight Routes
============================

What:  Aggregates behind the Stats, Home and Profile screens.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from puff.database import get_db_session
from puff.dependencies import get_current_user
from puff.models.user import User
from puff.schemas.common import ErrorResponse
from puff.schemas.insights import HomeSummaryResponse, ProfileStatsResponse, StatsResponse
from puff.services.insights_service import insights_service

router = APIRouter(
    prefix="/api/insights",
    tags=["Insights"],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
)


@router.get("/stats", response_model=StatsResponse, summary="Usage statistics")
async def get_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StatsResponse:
    return await insights_service.get_stats(db, user.id)


@router.get("/home", response_model=HomeSummaryResponse, summary="Recent activity and totals")
async def get_home(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> HomeSummaryResponse:
    return await insights_service.get_home(db, user.id)


@router.get("/profile", response_model=ProfileStatsResponse, summary="Profile counters")
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileStatsResponse:
    return await insights_service.get_profile(db, user.id)
