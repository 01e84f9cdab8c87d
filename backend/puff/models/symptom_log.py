"""
Puff Backend: Symptom Log SQLAlchemy Model
==========================================

What:  ORM model for the `symptom_logs` table used by the medical tracker.

Lifecycle:
    1. Created with a symptom and severity_before (1..10)
    2. Updated after medicating with severity_after, strain_used and method
    3. Only logs with both severity_after and strain_used feed relief insights
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from puff.database import Base
from puff.timeutils import utcnow


class SymptomLog(Base):
    __tablename__ = "symptom_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # One of catalog.SYMPTOMS ids
    symptom: Mapped[str] = mapped_column(String(30), nullable=False)

    severity_before: Mapped[int] = mapped_column(Integer, nullable=False)
    severity_after: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Strain name as the user knows it, not a foreign key
    strain_used: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    method: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_symptom_logs_user_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<SymptomLog(id={self.id}, symptom='{self.symptom}')>"
