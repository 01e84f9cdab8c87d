"""
Puff Backend: Strain SQLAlchemy Model
=====================================

What:  ORM model for the `strains` table: one row per strain in a user's stash.
How:   Flat record; effects are stored as a JSON array of catalog effect names.
Who:   StrainService for CRUD; recommendation and insights read it.

Index on (user_id, created_at):
    Every strain query filters by owner and most sort by creation time
    (stash list, home screen "recent strains").
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    false,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from puff.catalog import StrainType
from puff.database import Base
from puff.timeutils import utcnow


class Strain(Base):
    """
    A strain the user has tried or bought.

    Query Patterns:
        - Stash list: WHERE user_id = :uid ORDER BY created_at DESC LIMIT :n
        - Recommendations/insights: WHERE user_id = :uid (all rows)
    """

    __tablename__ = "strains"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    # One of catalog.StrainType values
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StrainType.HYBRID.value,
        server_default=text("'hybrid'"),
    )

    thc_percent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cbd_percent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # 1..5 stars
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=3,
        server_default=text("3"),
    )

    effects: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Opaque URL supplied by the client; the API never stores image bytes
    photo_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    dispensary: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    purchase_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    favorite: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    would_buy_again: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_strains_user_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Strain(id={self.id}, name='{self.name}', type='{self.type}')>"
