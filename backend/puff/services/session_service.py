"""
Puff Backend: Consumption Session Service
=========================================

What:  Logging, listing and editing consumption sessions.
How:   A new session must reference one of the caller's strains; the
       strain's name is copied onto the row so the diary entry survives
       renames and deletion of the strain.
Who:   /api/sessions routes; insight and recommendation services read
       sessions through load_all().
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from puff.exceptions import DatabaseError, NotFoundError, ValidationError
from puff.models.consumption_session import ConsumptionSession
from puff.schemas.session import (
    SessionCreate,
    SessionListResponse,
    SessionResponse,
    SessionUpdate,
)
from puff.services.pagination import fetch_page
from puff.services.strain_service import strain_service

logger = logging.getLogger(__name__)


class SessionService:

    async def create_session(
        self, db: AsyncSession, user_id: uuid.UUID, body: SessionCreate
    ) -> SessionResponse:
        """
        Raises:
            NotFoundError: strain_id is not one of the user's strains (→ 404)
        """
        strain = await strain_service.get_owned(db, user_id, body.strain_id)

        try:
            session = ConsumptionSession(
                user_id=user_id,
                strain_name=strain.name,
                **body.model_dump(),
            )
            db.add(session)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error logging session: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not log the session. Please try again.")

        logger.info("Session logged: %s (%s, %s)", session.id, strain.name, session.method)
        return SessionResponse.model_validate(session)

    async def _get_owned(
        self, db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
    ) -> ConsumptionSession:
        try:
            result = await db.execute(
                select(ConsumptionSession).where(
                    ConsumptionSession.id == session_id,
                    ConsumptionSession.user_id == user_id,
                )
            )
            session = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching session %s: %s", session_id, str(e))
            raise DatabaseError(message="Could not retrieve the session. Please try again.")

        if session is None:
            raise NotFoundError(resource="session", resource_id=str(session_id))
        return session

    async def get_session(
        self, db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID
    ) -> SessionResponse:
        return SessionResponse.model_validate(await self._get_owned(db, user_id, session_id))

    async def list_sessions(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        limit: int = 20,
        cursor: Optional[str] = None,
        sort: str = "created_at_desc",
        strain_id: Optional[uuid.UUID] = None,
        method: Optional[str] = None,
    ) -> SessionListResponse:
        filters = [ConsumptionSession.user_id == user_id]
        if strain_id is not None:
            filters.append(ConsumptionSession.strain_id == strain_id)
        if method is not None:
            filters.append(ConsumptionSession.method == method)

        try:
            rows, total_count, next_cursor, has_more = await fetch_page(
                db, ConsumptionSession, filters, limit=limit, cursor=cursor, sort=sort
            )
        except SQLAlchemyError as e:
            logger.error("Database error listing sessions: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve sessions. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return SessionListResponse(
            sessions=[SessionResponse.model_validate(row) for row in rows],
            total_count=total_count,
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def update_session(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        session_id: uuid.UUID,
        body: SessionUpdate,
    ) -> SessionResponse:
        session = await self._get_owned(db, user_id, session_id)
        changes = body.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("Nothing to update", field="body")

        try:
            for field, value in changes.items():
                setattr(session, field, value)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating session %s: %s", session_id, str(e))
            raise DatabaseError(message="Could not update the session. Please try again.")

        return SessionResponse.model_validate(session)

    async def delete_session(self, db: AsyncSession, user_id: uuid.UUID, session_id: uuid.UUID) -> None:
        session = await self._get_owned(db, user_id, session_id)
        try:
            await db.delete(session)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting session %s: %s", session_id, str(e))
            raise DatabaseError(message="Could not delete the session. Please try again.")

        logger.info("Session deleted: %s", session_id)

    async def load_all(self, db: AsyncSession, user_id: uuid.UUID) -> List[ConsumptionSession]:
        """All of the user's sessions, newest first."""
        try:
            result = await db.execute(
                select(ConsumptionSession)
                .where(ConsumptionSession.user_id == user_id)
                .order_by(ConsumptionSession.created_at.desc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error loading sessions: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve sessions. Please try again.")


session_service = SessionService()
