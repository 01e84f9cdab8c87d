"""
Puff Backend: Insights Service
==============================

What:  Aggregates for the Stats, Home and Profile screens.
How:   Plain Python passes over the user's strains and sessions. compute_stats
       takes `now` as an argument so the rolling windows are testable.

Definitions:
    sessions_last_N_days  created_at strictly after now - N days
    method percent        share of all sessions, one decimal
    avg_mood_change       mean(mood_after - mood_before) over sessions that
                          have both moods; 0 when there are none
    top_effects           5 most frequent session effects; ties keep the
                          order in which the effect first appeared
"""

import logging
import uuid
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from puff.models.consumption_session import ConsumptionSession
from puff.models.strain import Strain
from puff.schemas.insights import (
    EffectCount,
    HomeSummaryResponse,
    MethodCount,
    ProfileStatsResponse,
    StatsResponse,
    TypeCount,
)
from puff.schemas.session import SessionResponse
from puff.schemas.strain import StrainResponse
from puff.services.session_service import session_service
from puff.services.strain_service import strain_service
from puff.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

TOP_EFFECTS = 5
FAVORITES_SHOWN = 5
RECENT_ITEMS = 5


def count_since(sessions: Sequence[ConsumptionSession], now: datetime, days: int) -> int:
    cutoff = now - timedelta(days=days)
    return sum(1 for session in sessions if as_utc(session.created_at) > cutoff)


def average_mood_change(sessions: Sequence[ConsumptionSession]) -> float:
    changes = [
        session.mood_after - session.mood_before
        for session in sessions
        if session.mood_before and session.mood_after
    ]
    if not changes:
        return 0.0
    return sum(changes) / len(changes)


def average_rating(strains: Sequence[Strain]) -> float:
    if not strains:
        return 0.0
    return round(sum(strain.rating for strain in strains) / len(strains), 1)


def compute_stats(
    strains: Sequence[Strain],
    sessions: Sequence[ConsumptionSession],
    now: Optional[datetime] = None,
) -> StatsResponse:
    now = now or utcnow()
    total_sessions = len(sessions)

    method_counts = Counter(session.method for session in sessions)
    method_breakdown = [
        MethodCount(
            method=method,
            count=count,
            percent=round(count / total_sessions * 100, 1),
        )
        for method, count in method_counts.most_common()
    ]

    type_counts = Counter(strain.type for strain in strains)
    type_breakdown = [TypeCount(type=t, count=c) for t, c in type_counts.most_common()]

    effect_counts = Counter(
        effect for session in sessions for effect in session.effects or []
    )
    top_effects = [
        EffectCount(effect=effect, count=count)
        for effect, count in effect_counts.most_common(TOP_EFFECTS)
    ]

    avg_mood_change = average_mood_change(sessions)
    favorites = [strain for strain in strains if strain.favorite][:FAVORITES_SHOWN]

    return StatsResponse(
        total_strains=len(strains),
        total_sessions=total_sessions,
        sessions_last_7_days=count_since(sessions, now, 7),
        sessions_last_30_days=count_since(sessions, now, 30),
        method_breakdown=method_breakdown,
        type_breakdown=type_breakdown,
        avg_mood_change=round(avg_mood_change, 2),
        mood_improving=avg_mood_change > 0,
        top_effects=top_effects,
        favorite_strains=[StrainResponse.model_validate(strain) for strain in favorites],
    )


class InsightsService:
    """Loads the user's diary once per request and aggregates it."""

    async def get_stats(self, db: AsyncSession, user_id: uuid.UUID) -> StatsResponse:
        strains = await strain_service.load_all(db, user_id)
        sessions = await session_service.load_all(db, user_id)
        return compute_stats(strains, sessions)

    async def get_home(self, db: AsyncSession, user_id: uuid.UUID) -> HomeSummaryResponse:
        strains = await strain_service.load_all(db, user_id)
        sessions = await session_service.load_all(db, user_id)

        # load_all() returns newest first
        return HomeSummaryResponse(
            recent_strains=[StrainResponse.model_validate(s) for s in strains[:RECENT_ITEMS]],
            recent_sessions=[SessionResponse.model_validate(s) for s in sessions[:RECENT_ITEMS]],
            total_strains=len(strains),
            total_sessions=len(sessions),
            avg_rating=average_rating(strains),
        )

    async def get_profile(self, db: AsyncSession, user_id: uuid.UUID) -> ProfileStatsResponse:
        strains: List[Strain] = await strain_service.load_all(db, user_id)
        sessions = await session_service.load_all(db, user_id)
        return ProfileStatsResponse(
            total_strains=len(strains),
            total_sessions=len(sessions),
            favorite_count=sum(1 for strain in strains if strain.favorite),
            avg_rating=average_rating(strains),
        )


insights_service = InsightsService()
