"""
Puff Backend: Strain Service
============================

What:  CRUD for a user's strain collection.
How:   Every query is filtered by user_id; a strain owned by someone else is
       reported exactly like a missing one (404).
Who:   Called by the /api/strains routes; RecommendationService and
       InsightsService read strains through load_all().
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from puff.exceptions import DatabaseError, NotFoundError, ValidationError
from puff.models.consumption_session import ConsumptionSession
from puff.models.strain import Strain
from puff.schemas.strain import (
    StrainCreate,
    StrainListResponse,
    StrainResponse,
    StrainUpdate,
)
from puff.services.pagination import fetch_page

logger = logging.getLogger(__name__)


class StrainService:

    async def create_strain(
        self, db: AsyncSession, user_id: uuid.UUID, body: StrainCreate
    ) -> StrainResponse:
        try:
            strain = Strain(user_id=user_id, **body.model_dump())
            db.add(strain)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating strain: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not save the strain. Please try again.")

        logger.info("Strain created: %s (%s)", strain.id, strain.type)
        return StrainResponse.model_validate(strain)

    async def get_owned(self, db: AsyncSession, user_id: uuid.UUID, strain_id: uuid.UUID) -> Strain:
        """
        Fetch one of the user's strains as an ORM row.

        Raises:
            NotFoundError: no such strain for this user (→ 404)
        """
        try:
            result = await db.execute(
                select(Strain).where(Strain.id == strain_id, Strain.user_id == user_id)
            )
            strain = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching strain %s: %s", strain_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the strain. Please try again.",
                context={"strain_id": str(strain_id)},
            )

        if strain is None:
            raise NotFoundError(resource="strain", resource_id=str(strain_id))
        return strain

    async def get_strain(
        self, db: AsyncSession, user_id: uuid.UUID, strain_id: uuid.UUID
    ) -> StrainResponse:
        strain = await self.get_owned(db, user_id, strain_id)
        return StrainResponse.model_validate(strain)

    async def list_strains(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        limit: int = 20,
        cursor: Optional[str] = None,
        sort: str = "created_at_desc",
        strain_type: Optional[str] = None,
        favorite: Optional[bool] = None,
    ) -> StrainListResponse:
        """
        List the user's strains, newest first by default.

        Filters:
            strain_type: only strains of this type
            favorite:    only favorites (True) or non-favorites (False)
        """
        filters = [Strain.user_id == user_id]
        if strain_type is not None:
            filters.append(Strain.type == strain_type)
        if favorite is not None:
            filters.append(Strain.favorite == favorite)

        try:
            rows, total_count, next_cursor, has_more = await fetch_page(
                db, Strain, filters, limit=limit, cursor=cursor, sort=sort
            )
        except SQLAlchemyError as e:
            logger.error("Database error listing strains: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve strains. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return StrainListResponse(
            strains=[StrainResponse.model_validate(row) for row in rows],
            total_count=total_count,
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def update_strain(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        strain_id: uuid.UUID,
        body: StrainUpdate,
    ) -> StrainResponse:
        strain = await self.get_owned(db, user_id, strain_id)
        changes = body.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("Nothing to update", field="body")

        try:
            for field, value in changes.items():
                setattr(strain, field, value)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating strain %s: %s", strain_id, str(e))
            raise DatabaseError(message="Could not update the strain. Please try again.")

        logger.info("Strain %s updated: %s", strain_id, ", ".join(sorted(changes)))
        return StrainResponse.model_validate(strain)

    async def delete_strain(self, db: AsyncSession, user_id: uuid.UUID, strain_id: uuid.UUID) -> None:
        """
        Delete a strain. Its sessions stay in the diary with strain_id cleared;
        strain_name still carries the name they were logged under.
        """
        strain = await self.get_owned(db, user_id, strain_id)

        try:
            # Not left to ON DELETE SET NULL: SQLite does not enforce foreign keys by default
            await db.execute(
                update(ConsumptionSession)
                .where(
                    ConsumptionSession.user_id == user_id,
                    ConsumptionSession.strain_id == strain_id,
                )
                .values(strain_id=None)
                .execution_options(synchronize_session=False)
            )
            await db.delete(strain)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting strain %s: %s", strain_id, str(e))
            raise DatabaseError(message="Could not delete the strain. Please try again.")

        logger.info("Strain deleted: %s", strain_id)

    async def load_all(self, db: AsyncSession, user_id: uuid.UUID) -> List[Strain]:
        """All of the user's strains, newest first."""
        try:
            result = await db.execute(
                select(Strain)
                .where(Strain.user_id == user_id)
                .order_by(Strain.created_at.desc())
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error loading strains: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not retrieve strains. Please try again.")


strain_service = StrainService()
