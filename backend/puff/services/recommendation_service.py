"""
Puff Backend: Recommendation Service
====================================

What:  Suggests which of the user's own strains fits a chosen vibe.
How:   score_strains() is a pure scoring pass over strains and sessions that
       were already loaded; the service only loads them and shapes the reply.

Scoring (per strain):
    +3              strain type is one of the vibe's preferred types
    +2 per effect   strain effect that is a vibe keyword
    +rating         1..5 stars
    +2              favorite
    +1              would buy again
    per session logged with this strain:
        +1 per session effect that is a vibe keyword
        +1 if mood_after > mood_before

Ranking is score descending; ties keep the input order (sorted() is stable).
"""

import logging
import uuid
from typing import Iterable, List, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from puff.catalog import VIBES, Vibe, find_vibe
from puff.exceptions import NotFoundError
from puff.models.consumption_session import ConsumptionSession
from puff.models.strain import Strain
from puff.schemas.recommend import RecommendationResponse, ScoredStrain, VibeResponse
from puff.schemas.strain import StrainResponse
from puff.services.session_service import session_service
from puff.services.strain_service import strain_service

logger = logging.getLogger(__name__)

TOP_N = 3


def _session_bonus(session: ConsumptionSession, keywords: Sequence[str]) -> int:
    bonus = sum(1 for effect in session.effects or [] if effect in keywords)
    if session.mood_before and session.mood_after and session.mood_after > session.mood_before:
        bonus += 1
    return bonus


def score_strain(strain: Strain, sessions: Iterable[ConsumptionSession], vibe: Vibe) -> int:
    keywords = vibe["keywords"]
    score = 0

    if strain.type in vibe["strain_types"]:
        score += 3

    score += 2 * sum(1 for effect in strain.effects or [] if effect in keywords)
    score += strain.rating

    if strain.favorite:
        score += 2
    if strain.would_buy_again:
        score += 1

    for session in sessions:
        if session.strain_id == strain.id:
            score += _session_bonus(session, keywords)

    return score


def score_strains(
    strains: Sequence[Strain],
    sessions: Sequence[ConsumptionSession],
    vibe: Vibe,
    top_n: int = TOP_N,
) -> List[Tuple[Strain, int]]:
    """Best `top_n` strains for the vibe as (strain, score), highest first."""
    scored = [(strain, score_strain(strain, sessions, vibe)) for strain in strains]
    scored = sorted(scored, key=lambda pair: pair[1], reverse=True)
    return scored[:top_n]


class RecommendationService:

    def list_vibes(self) -> List[VibeResponse]:
        return [VibeResponse(**vibe) for vibe in VIBES]

    async def recommend(
        self, db: AsyncSession, user_id: uuid.UUID, vibe_id: str
    ) -> RecommendationResponse:
        """
        Raises:
            NotFoundError: vibe_id is not in the catalog (→ 404)
        """
        vibe = find_vibe(vibe_id)
        if vibe is None:
            raise NotFoundError(resource="vibe", resource_id=vibe_id)

        strains = await strain_service.load_all(db, user_id)
        sessions = await session_service.load_all(db, user_id)
        ranked = score_strains(strains, sessions, vibe)

        logger.debug(
            "Recommendations for vibe '%s': %d strains scored, top scores %s",
            vibe_id, len(strains), [score for _, score in ranked],
        )

        return RecommendationResponse(
            vibe=VibeResponse(**vibe),
            recommendations=[
                ScoredStrain(strain=StrainResponse.model_validate(strain), score=score)
                for strain, score in ranked
            ],
        )


recommendation_service = RecommendationService()
