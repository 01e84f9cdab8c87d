"""
Puff Backend: Medical Service
=============================

What:  Symptom logs, the relief aggregator and the plain-text doctor report.
How:   compute_relief_insights() and build_doctor_report() are pure functions
       over rows already loaded (newest first); MedicalService does the I/O.

Relief:
    For each log that has both severity_after and strain_used,
    relief = severity_before - severity_after. Reliefs are averaged per
    (symptom, strain). A symptom's best strain is the one with the highest
    average relief above zero; on a tie the strain seen first wins.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from puff.catalog import SYMPTOMS
from puff.exceptions import DatabaseError, NotFoundError, ValidationError
from puff.models.consumption_session import ConsumptionSession
from puff.models.symptom_log import SymptomLog
from puff.schemas.medical import (
    MedicalInsightsResponse,
    SymptomInsight,
    SymptomLogCreate,
    SymptomLogResponse,
    SymptomLogUpdate,
)
from puff.services.session_service import session_service
from puff.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

REPORT_PERIOD_DAYS = 30

_SYMPTOM_LABELS = {symptom["id"]: symptom["label"] for symptom in SYMPTOMS}


def compute_relief_insights(logs: Sequence[SymptomLog]) -> Dict[str, SymptomInsight]:
    """Best-relief strain per symptom, keyed by symptom id."""
    reliefs: Dict[str, Dict[str, List[int]]] = {}
    for log in logs:
        if log.severity_after is None or not log.strain_used:
            continue
        by_strain = reliefs.setdefault(log.symptom, {})
        by_strain.setdefault(log.strain_used, []).append(log.severity_before - log.severity_after)

    insights: Dict[str, SymptomInsight] = {}
    for symptom, by_strain in reliefs.items():
        best_strain: Optional[str] = None
        best_relief = 0.0
        for strain, values in by_strain.items():
            average = sum(values) / len(values)
            if average > best_relief:
                best_strain, best_relief = strain, average
        if best_strain is not None:
            insights[symptom] = SymptomInsight(
                symptom=symptom,
                label=_SYMPTOM_LABELS.get(symptom, symptom),
                best_strain=best_strain,
                avg_relief=round(best_relief, 2),
            )
    return insights


def format_report_date(value: datetime) -> str:
    """'Mar 5, 2025': abbreviated month, unpadded day."""
    return f"{value:%b} {value.day}, {value.year}"


def build_doctor_report(
    logs: Sequence[SymptomLog],
    sessions: Sequence[ConsumptionSession],
    now: Optional[datetime] = None,
) -> str:
    """
    Plain-text summary of the last 30 days for sharing with a clinician.

    Both sequences are expected newest first. Best-relief strains come from
    the whole log history, not just the report period.
    """
    now = now or utcnow()
    cutoff = now - timedelta(days=REPORT_PERIOD_DAYS)
    insights = compute_relief_insights(logs)
    recent_logs = [log for log in logs if as_utc(log.created_at) > cutoff]

    lines = [
        "CANNABIS USE REPORT",
        f"Generated: {format_report_date(now)}",
        f"Period: Last {REPORT_PERIOD_DAYS} days",
        "",
        "SYMPTOM SUMMARY:",
    ]

    for symptom in SYMPTOMS:
        symptom_logs = [log for log in recent_logs if log.symptom == symptom["id"]]
        if not symptom_logs:
            continue
        avg_severity = sum(log.severity_before for log in symptom_logs) / len(symptom_logs)
        lines.append(
            f"- {symptom['label']}: {len(symptom_logs)} logs, avg severity {avg_severity:.1f}/10"
        )
        if symptom["id"] in insights:
            lines.append(f"  Best relief with: {insights[symptom['id']].best_strain}")

    recent_sessions = [s for s in sessions if as_utc(s.created_at) > cutoff]
    method_counts = Counter(session.method for session in recent_sessions)

    lines.extend([
        "",
        "SESSION SUMMARY:",
        f"- Total sessions: {len(recent_sessions)}",
        "- Methods: " + ", ".join(f"{method} ({count})" for method, count in method_counts.items()),
    ])
    return "\n".join(lines) + "\n"


class MedicalService:

    async def create_log(
        self, db: AsyncSession, user_id: uuid.UUID, body: SymptomLogCreate
    ) -> SymptomLogResponse:
        try:
            log = SymptomLog(user_id=user_id, **body.model_dump())
            db.add(log)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving symptom log: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not save. Try again.")

        logger.info("Symptom logged: %s (%s, severity %d)", log.id, log.symptom, log.severity_before)
        return SymptomLogResponse.model_validate(log)

    async def _load_logs(
        self, db: AsyncSession, user_id: uuid.UUID, limit: Optional[int] = None
    ) -> List[SymptomLog]:
        query = (
            select(SymptomLog)
            .where(SymptomLog.user_id == user_id)
            .order_by(SymptomLog.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        try:
            result = await db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error loading symptom logs: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve symptom logs. Please try again.")

    async def list_logs(
        self, db: AsyncSession, user_id: uuid.UUID, limit: int = 50
    ) -> List[SymptomLogResponse]:
        logs = await self._load_logs(db, user_id, limit=limit)
        return [SymptomLogResponse.model_validate(log) for log in logs]

    async def _get_owned(self, db: AsyncSession, user_id: uuid.UUID, log_id: uuid.UUID) -> SymptomLog:
        try:
            result = await db.execute(
                select(SymptomLog).where(SymptomLog.id == log_id, SymptomLog.user_id == user_id)
            )
            log = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching symptom log %s: %s", log_id, str(e))
            raise DatabaseError(message="Could not retrieve the symptom log. Please try again.")

        if log is None:
            raise NotFoundError(resource="symptom log", resource_id=str(log_id))
        return log

    async def update_log(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        log_id: uuid.UUID,
        body: SymptomLogUpdate,
    ) -> SymptomLogResponse:
        log = await self._get_owned(db, user_id, log_id)
        changes = body.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("Nothing to update", field="body")

        try:
            for field, value in changes.items():
                setattr(log, field, value)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating symptom log %s: %s", log_id, str(e))
            raise DatabaseError(message="Could not save. Try again.")
        return SymptomLogResponse.model_validate(log)

    async def delete_log(self, db: AsyncSession, user_id: uuid.UUID, log_id: uuid.UUID) -> None:
        log = await self._get_owned(db, user_id, log_id)
        try:
            await db.delete(log)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting symptom log %s: %s", log_id, str(e))
            raise DatabaseError(message="Could not delete the symptom log. Please try again.")

    async def get_insights(self, db: AsyncSession, user_id: uuid.UUID) -> MedicalInsightsResponse:
        logs = await self._load_logs(db, user_id)
        return MedicalInsightsResponse(insights=list(compute_relief_insights(logs).values()))

    async def get_report(self, db: AsyncSession, user_id: uuid.UUID) -> str:
        logs = await self._load_logs(db, user_id)
        sessions = await session_service.load_all(db, user_id)
        return build_doctor_report(logs, sessions)


medical_service = MedicalService()
