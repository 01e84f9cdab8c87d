"""
Puff Backend: Insight Schemas
=============================

What:  Aggregates shown on the Stats, Home and Profile screens.
"""

from typing import List

from pydantic import BaseModel, Field

from puff.schemas.session import SessionResponse
from puff.schemas.strain import StrainResponse


class MethodCount(BaseModel):
    method: str
    count: int
    percent: float = Field(description="Share of all sessions, 0-100")


class TypeCount(BaseModel):
    type: str
    count: int


class EffectCount(BaseModel):
    effect: str
    count: int


class StatsResponse(BaseModel):
    total_strains: int
    total_sessions: int
    sessions_last_7_days: int
    sessions_last_30_days: int
    method_breakdown: List[MethodCount]
    type_breakdown: List[TypeCount]
    avg_mood_change: float
    mood_improving: bool
    top_effects: List[EffectCount]
    favorite_strains: List[StrainResponse]


class HomeSummaryResponse(BaseModel):
    recent_strains: List[StrainResponse]
    recent_sessions: List[SessionResponse]
    total_strains: int
    total_sessions: int
    avg_rating: float


class ProfileStatsResponse(BaseModel):
    total_strains: int
    total_sessions: int
    favorite_count: int
    avg_rating: float
