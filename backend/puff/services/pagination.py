"""
Cursor pagination shared by the strain and session listings.

The cursor is "<ISO created_at>,<id>" of the last row on the previous page.
Rows are ordered by (created_at, id), so rows sharing a timestamp are split
across pages without being skipped. A bare ISO timestamp is still accepted
and pages on created_at alone.

Fetching limit + 1 rows tells us whether another page exists without a
second round trip; total_count is a separate COUNT over the same filters
(the cursor is not applied to it).
"""

import uuid
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import Select, and_, asc, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from puff.timeutils import as_utc

SORT_OPTIONS = ("created_at_desc", "created_at_asc")


def encode_cursor(row: Any) -> str:
    return f"{as_utc(row.created_at).isoformat()},{row.id}"


def parse_cursor(cursor: Optional[str]) -> Optional[Tuple[datetime, Optional[uuid.UUID]]]:
    """Invalid cursors are ignored and the listing starts from the beginning."""
    if not cursor:
        return None

    timestamp, _, row_id = cursor.partition(",")
    try:
        created_at = as_utc(datetime.fromisoformat(timestamp))
        return created_at, (uuid.UUID(row_id) if row_id else None)
    except ValueError:
        return None


async def fetch_page(
    db: AsyncSession,
    model: Any,
    filters: Sequence[Any],
    limit: int,
    cursor: Optional[str],
    sort: str,
) -> Tuple[List[Any], int, Optional[str], bool]:
    """Returns (rows, total_count, next_cursor, has_more)."""
    query: Select = select(model).where(*filters)
    ascending = sort == "created_at_asc"

    position = parse_cursor(cursor)
    if position is not None:
        created_at, row_id = position
        if ascending:
            after = model.created_at > created_at
            tie = model.id > row_id if row_id else None
        else:
            after = model.created_at < created_at
            tie = model.id < row_id if row_id else None
        if tie is not None:
            after = or_(after, and_(model.created_at == created_at, tie))
        query = query.where(after)

    order = asc if ascending else desc
    query = query.order_by(order(model.created_at), order(model.id))

    result = await db.execute(query.limit(limit + 1))
    rows = list(result.scalars().all())

    count_result = await db.execute(select(func.count(model.id)).where(*filters))
    total_count = count_result.scalar() or 0

    has_more = len(rows) > limit
    if has_more:
        rows = rows[:limit]

    next_cursor = encode_cursor(rows[-1]) if has_more and rows else None

    return rows, total_count, next_cursor, has_more
