"""
Puff Backend: User SQLAlchemy Model
===================================

What:  ORM model for the `users` table: one row per registered account.
Who:   AuthService (signup/login) and the get_current_user dependency.

Table Design:
    - UUID primary key, referenced by every other table's user_id
    - email: stored lower-cased, unique index backs the duplicate check
    - password_salt / password_hash: hex-encoded PBKDF2-HMAC-SHA256 output;
      the plain password is never stored
    - is_pro: subscription flag, always false for new accounts
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid, false, text
from sqlalchemy.orm import Mapped, mapped_column

from puff.database import Base
from puff.timeutils import utcnow


class User(Base):
    """A registered diary owner."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        comment="Lower-cased login email",
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    password_salt: Mapped[str] = mapped_column(String(64), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    is_pro: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
