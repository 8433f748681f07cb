"""Limit/offset windowing for ledger queries."""

from __future__ import annotations

from sqlalchemy import Select

MAX_LIMIT = 500


def paginate(stmt: Select, limit: int, offset: int = 0) -> Select:
    """Bound a select to one page; the caller supplies the ordering.

    Uses the same bounds the HTTP query schemas enforce (1..MAX_LIMIT, offset >= 0)
    and raises ValueError("invalid_window") instead of adjusting the values.
    """
    if not 1 <= limit <= MAX_LIMIT or offset < 0:
        raise ValueError("invalid_window")
    return stmt.limit(limit).offset(offset)
