"""
Puff Backend: Tolerance Break Service
=====================================

What:  Start, check and end a tolerance break (a planned pause in use).
How:   One break per user, stored on the tolerance_breaks row keyed by
       user_id. Progress is derived at read time by compute_break_status(),
       which takes `now` explicitly.
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from puff.catalog import BENEFITS_TIMELINE, BREAK_DURATIONS, COPING_TIPS
from puff.exceptions import DatabaseError, NotFoundError
from puff.models.tolerance_break import ToleranceBreak
from puff.schemas.tolerance import (
    Milestone,
    ToleranceBreakStart,
    ToleranceBreakStatus,
    ToleranceGuide,
)
from puff.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86_400
SECONDS_PER_HOUR = 3_600


def compute_break_status(
    start_date: datetime,
    target_days: int,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ToleranceBreakStatus:
    """
    Day counter for a running break.

    days_completed   whole days since start (truncated)
    hours_completed  whole hours since start (truncated)
    progress         days / target as a percentage, capped at 100
    milestone        last timeline entry already reached, or the first entry
                     when none has been reached yet
    """
    start = as_utc(start_date)
    now = now or utcnow()
    elapsed = max((now - start).total_seconds(), 0)

    days = int(elapsed // SECONDS_PER_DAY)
    hours = int(elapsed // SECONDS_PER_HOUR)

    timeline = [Milestone(**entry, reached=days >= entry["day"]) for entry in BENEFITS_TIMELINE]
    reached = [milestone for milestone in timeline if milestone.reached]
    current = reached[-1] if reached else timeline[0]

    return ToleranceBreakStatus(
        start_date=start,
        target_days=target_days,
        reason=reason,
        target_date=start + timedelta(days=target_days),
        days_completed=days,
        hours_completed=hours,
        progress_percent=round(min(days / target_days * 100, 100.0), 1),
        completed=days >= target_days,
        current_milestone=current,
        timeline=timeline,
    )


class ToleranceService:

    def get_guide(self) -> ToleranceGuide:
        return ToleranceGuide(
            durations=list(BREAK_DURATIONS),
            coping_tips=list(COPING_TIPS),
            timeline=[Milestone(**entry) for entry in BENEFITS_TIMELINE],
        )

    async def start_break(
        self, db: AsyncSession, user_id: uuid.UUID, body: ToleranceBreakStart
    ) -> ToleranceBreakStatus:
        """Start a break now. A break already in progress is replaced."""
        try:
            current = await db.get(ToleranceBreak, user_id)
            if current is None:
                current = ToleranceBreak(user_id=user_id)
                db.add(current)
            else:
                logger.info("Replacing tolerance break for user %s", user_id)
            current.start_date = utcnow()
            current.target_days = body.target_days
            current.reason = body.reason
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error starting tolerance break: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not start the break. Please try again.")

        logger.info("Tolerance break started: %d days", body.target_days)
        return compute_break_status(current.start_date, current.target_days, current.reason)

    async def _get_current(self, db: AsyncSession, user_id: uuid.UUID) -> ToleranceBreak:
        try:
            current = await db.get(ToleranceBreak, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading tolerance break: %s", str(e))
            raise DatabaseError(message="Could not load your break. Please try again.")

        if current is None:
            raise NotFoundError(resource="tolerance break")
        return current

    async def get_status(self, db: AsyncSession, user_id: uuid.UUID) -> ToleranceBreakStatus:
        """
        Raises:
            NotFoundError: no break in progress (→ 404)
        """
        current = await self._get_current(db, user_id)
        return compute_break_status(current.start_date, current.target_days, current.reason)

    async def end_break(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        current = await self._get_current(db, user_id)
        try:
            await db.delete(current)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error ending tolerance break: %s", str(e))
            raise DatabaseError(message="Could not end the break. Please try again.")

        logger.info("Tolerance break ended for user %s", user_id)


tolerance_service = ToleranceService()
