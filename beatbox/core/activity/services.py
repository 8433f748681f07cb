"""Activity ledger: append typed user actions and read them back by window."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import select

from beatbox.core.activity.constants import DEFAULT_ACTIVITY_LIMIT, DEFAULT_WINDOW_DAYS
from beatbox.core.activity.models import ActivityEvent
from beatbox.core.utils.ids import new_id
from beatbox.core.utils.pagination import paginate
from beatbox.core.utils.validation import require_fields
from beatbox.extensions import db


def record_activity(
    user_id: Optional[str],
    activity_type: Optional[str],
    metadata: Optional[dict[str, Any]] = None,
    *,
    email: Optional[str] = None,
    page_url: Optional[str] = None,
    action: Optional[str] = None,
    session_id: Optional[str] = None,
    commit: bool = True,
) -> ActivityEvent:
    """Append one immutable event stamped with the current time.

    Producers are already authenticated; the allowlist is not consulted here.
    """
    require_fields(user_id=user_id, activity_type=activity_type)
    event = ActivityEvent(
        id=new_id(),
        user_id=user_id,
        activity_type=activity_type.strip(),
        timestamp=datetime.utcnow(),
        email=email,
        page_url=page_url,
        action=action,
        session_id=session_id,
        details=dict(metadata or {}),
    )
    db.session.add(event)
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return event


def list_activity(
    user_id: Optional[str] = None,
    activity_type: Optional[str] = None,
    since_days: Optional[int] = None,
    *,
    limit: int = DEFAULT_ACTIVITY_LIMIT,
    offset: int = 0,
) -> list[ActivityEvent]:
    """Events from the trailing window, newest first; filters combine with AND."""
    days = DEFAULT_WINDOW_DAYS if since_days is None else since_days
    start = datetime.utcnow() - timedelta(days=days)

    stmt = select(ActivityEvent).where(ActivityEvent.timestamp >= start)
    if user_id:
        stmt = stmt.where(ActivityEvent.user_id == user_id)
    if activity_type:
        stmt = stmt.where(ActivityEvent.activity_type == activity_type)
    stmt = stmt.order_by(ActivityEvent.timestamp.desc(), ActivityEvent.id)
    return list(db.session.scalars(paginate(stmt, limit, offset)))


__all__ = ["list_activity", "record_activity"]
