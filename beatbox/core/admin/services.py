"""Admin query layer: administrator check and cross-ledger aggregation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from beatbox.core.activity.models import ActivityEvent
from beatbox.core.auth.allowlist import Allowlist, get_admin_emails, normalize_email
from beatbox.core.sessions.models import SessionRecord
from beatbox.core.users.models import Identity
from beatbox.extensions import db

logger = logging.getLogger(__name__)


def is_administrator(email: Optional[str], admin_emails: Optional[Allowlist] = None) -> bool:
    """Strict membership in the administrator set; stricter than the allowlist."""
    if normalize_email(email) is None:
        return False
    admin_emails = admin_emails if admin_emails is not None else get_admin_emails()
    return email in admin_emails


@dataclass
class UserStats:
    identity: Identity
    total_sessions: int
    last_sign_in: Optional[datetime]
    total_activity: int
    last_activity: Optional[datetime]


def list_users_with_stats() -> list[UserStats]:
    """Every identity with session and activity aggregates, newest identity first.

    Each ledger is aggregated per user before the outer join so that session
    counts are never multiplied by activity rows (and vice versa). Identities
    with no rows in a ledger get 0 / None for it.
    """
    session_stats = (
        select(
            SessionRecord.user_id.label("user_id"),
            func.count(SessionRecord.id).label("total_sessions"),
            func.max(SessionRecord.sign_in_at).label("last_sign_in"),
        )
        .group_by(SessionRecord.user_id)
        .subquery("session_stats")
    )
    activity_stats = (
        select(
            ActivityEvent.user_id.label("user_id"),
            func.count(ActivityEvent.id).label("total_activity"),
            func.max(ActivityEvent.timestamp).label("last_activity"),
        )
        .group_by(ActivityEvent.user_id)
        .subquery("activity_stats")
    )
    stmt = (
        select(
            Identity,
            func.coalesce(session_stats.c.total_sessions, 0),
            session_stats.c.last_sign_in,
            func.coalesce(activity_stats.c.total_activity, 0),
            activity_stats.c.last_activity,
        )
        .outerjoin(session_stats, session_stats.c.user_id == Identity.id)
        .outerjoin(activity_stats, activity_stats.c.user_id == Identity.id)
        .order_by(Identity.created_at.desc(), Identity.id)
    )
    return [
        UserStats(
            identity=identity,
            total_sessions=int(total_sessions),
            last_sign_in=last_sign_in,
            total_activity=int(total_activity),
            last_activity=last_activity,
        )
        for identity, total_sessions, last_sign_in, total_activity, last_activity in db.session.execute(stmt)
    ]


def admin_health() -> dict:
    """Probe both ledger tables; report rather than raise on store errors."""
    try:
        has_sessions = db.session.execute(select(SessionRecord.id).limit(1)).first() is not None
        has_activity = db.session.execute(select(ActivityEvent.id).limit(1)).first() is not None
    except SQLAlchemyError:
        logger.exception("admin health: database probe failed")
        db.session.rollback()
        return {"status": "error", "tableCounts": {}}
    return {
        "status": "connected",
        "tableCounts": {"userSessions": int(has_sessions), "userActivity": int(has_activity)},
    }


__all__ = ["UserStats", "admin_health", "is_administrator", "list_users_with_stats"]
