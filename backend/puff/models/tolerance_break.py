"""
Puff Backend: Tolerance Break SQLAlchemy Model
==============================================

What:  ORM model for the `tolerance_breaks` table.
How:   Keyed by user_id: a user has at most one break at a time. Starting a
       new break replaces the row; ending a break deletes it.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from puff.database import Base
from puff.timeutils import utcnow


class ToleranceBreak(Base):
    __tablename__ = "tolerance_breaks"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )

    start_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    target_days: Mapped[int] = mapped_column(Integer, nullable=False)

    reason: Mapped[Optional[str]] = mapped_column(String(280), nullable=True)

    def __repr__(self) -> str:
        return f"<ToleranceBreak(user_id={self.user_id}, target_days={self.target_days})>"
