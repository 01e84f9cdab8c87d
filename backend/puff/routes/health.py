"""
Puff Backend: Health Check Route
================================

What:  GET /health for Docker health checks and load balancer probes.
How:   Runs SELECT 1 against the database. Healthy → 200; database
       unreachable → 503 so the instance is taken out of rotation.
       Not rate limited and not access-logged (see middleware).
"""

import logging
import time

from fastapi import APIRouter, Response, status
from sqlalchemy import text

from puff import __version__
from puff import database
from puff.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
