"""Schemas for session ledger IO."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from beatbox.core.sessions.models import SessionRecord
from beatbox.core.sessions.services import DEFAULT_SESSION_LIMIT
from beatbox.core.utils.pagination import MAX_LIMIT
from beatbox.core.utils.schemas import CamelModel, WindowQuery


class SessionCreateRequest(CamelModel):
    # Presence is checked by the ledger so the error names every missing field.
    user_id: Optional[str] = None
    email: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class SessionListQuery(WindowQuery):
    user_id: Optional[str] = None
    limit: int = Field(default=DEFAULT_SESSION_LIMIT, ge=1, le=MAX_LIMIT)
    offset: int = Field(default=0, ge=0)


class SessionResponse(CamelModel):
    id: str
    user_id: str
    email: str
    sign_in_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    is_active: bool


def serialize_session(record: SessionRecord) -> dict:
    return SessionResponse(
        id=record.id,
        user_id=record.user_id,
        email=record.email,
        sign_in_at=record.sign_in_at,
        ip_address=record.ip_address,
        user_agent=record.user_agent,
        is_active=record.is_active,
    ).to_json()
