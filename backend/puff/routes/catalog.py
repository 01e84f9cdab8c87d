"""
Puff Backend: Catalog Route
===========================

What:  GET /api/catalog, every fixed vocabulary in one document.
How:   Public and static, so it carries a long Cache-Control.
"""

from fastapi import APIRouter, Response

from puff import catalog
from puff.schemas.common import CatalogResponse

router = APIRouter(prefix="/api", tags=["Catalog"])


@router.get(
    "/catalog",
    response_model=CatalogResponse,
    summary="Every fixed vocabulary, including the tolerance-break guide",
)
async def get_catalog(response: Response) -> CatalogResponse:
    response.headers["Cache-Control"] = "public, max-age=86400"
    return CatalogResponse(
        strain_types=catalog.STRAIN_TYPES,
        methods=catalog.METHODS,
        effects=catalog.EFFECTS,
        moods=catalog.MOOD_EMOJIS,
        vibes=list(catalog.VIBES),
        symptoms=catalog.SYMPTOMS,
        break_durations=catalog.BREAK_DURATIONS,
        benefits_timeline=catalog.BENEFITS_TIMELINE,
        coping_tips=catalog.COPING_TIPS,
    )
