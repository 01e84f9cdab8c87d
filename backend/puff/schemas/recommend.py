"""
Puff Backend: Recommendation Schemas
====================================
"""

from typing import List

from pydantic import BaseModel

from puff.schemas.strain import StrainResponse


class VibeResponse(BaseModel):
    id: str
    label: str
    icon: str
    keywords: List[str]
    strain_types: List[str]


class ScoredStrain(BaseModel):
    strain: StrainResponse
    score: int


class RecommendationResponse(BaseModel):
    vibe: VibeResponse
    recommendations: List[ScoredStrain]
