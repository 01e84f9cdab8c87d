"""
Puff Backend: Consumption Session SQLAlchemy Model
==================================================

What:  ORM model for the `sessions` table: one row per logged consumption.
       Named ConsumptionSession to stay clear of SQLAlchemy's own Session.

Table Design:
    - strain_id: nullable, set to NULL when the strain is deleted
    - strain_name: copied from the strain at log time so history still reads
      correctly after the strain is renamed or removed
    - mood_before is always recorded; mood_after is filled in later (PATCH)
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from puff.catalog import ConsumptionMethod
from puff.database import Base
from puff.timeutils import utcnow


class ConsumptionSession(Base):
    __tablename__ = "sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    strain_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("strains.id", ondelete="SET NULL"),
        nullable=True,
    )

    strain_name: Mapped[str] = mapped_column(String(120), nullable=False)

    # One of catalog.ConsumptionMethod values
    method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ConsumptionMethod.SMOKE.value,
        server_default=text("'smoke'"),
    )

    # Free text, e.g. "half a joint", "10mg"
    amount: Mapped[Optional[str]] = mapped_column(String(60), nullable=True)

    # Moods on a 1..5 scale
    mood_before: Mapped[int] = mapped_column(
        Integer, nullable=False, default=3, server_default=text("3")
    )
    mood_after: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    effects: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Minutes
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_sessions_user_created_at", "user_id", "created_at"),
        Index("idx_sessions_strain_id", "strain_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConsumptionSession(id={self.id}, strain='{self.strain_name}', "
            f"method='{self.method}')>"
        )
