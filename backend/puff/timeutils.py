"""
UTC helpers shared by models and services.

All timestamps are stored in UTC. PostgreSQL returns timezone-aware values;
SQLite drops the offset and returns naive ones, so anything that compares or
subtracts datetimes goes through as_utc() first.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
