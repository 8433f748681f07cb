"""Session ledger: append and read sign-in records."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select

from beatbox.core.sessions.models import SessionRecord
from beatbox.core.utils.ids import new_id
from beatbox.core.utils.pagination import paginate
from beatbox.core.utils.validation import require_fields
from beatbox.extensions import db

DEFAULT_SESSION_LIMIT = 50


def record_sign_in(
    user_id: Optional[str],
    email: Optional[str],
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    *,
    commit: bool = True,
) -> SessionRecord:
    """Write one SessionRecord for a sign-in that already passed the gate.

    Raises MissingFieldsError (a ValueError) when user_id or email is blank.
    """
    require_fields(user_id=user_id, email=email)
    record = SessionRecord(
        id=new_id(),
        user_id=user_id,
        email=email,
        sign_in_at=datetime.utcnow(),
        ip_address=ip_address,
        user_agent=user_agent,
        is_active=True,
    )
    db.session.add(record)
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return record


def list_sessions(
    user_id: Optional[str] = None,
    *,
    limit: int = DEFAULT_SESSION_LIMIT,
    offset: int = 0,
) -> list[SessionRecord]:
    """Most recent sign-ins first, optionally for one user."""
    stmt = select(SessionRecord)
    if user_id:
        stmt = stmt.where(SessionRecord.user_id == user_id)
    stmt = stmt.order_by(SessionRecord.sign_in_at.desc(), SessionRecord.id)
    return list(db.session.scalars(paginate(stmt, limit, offset)))


__all__ = ["DEFAULT_SESSION_LIMIT", "list_sessions", "record_sign_in"]
