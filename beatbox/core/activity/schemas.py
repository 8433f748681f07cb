"""Schemas for activity ledger IO."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from beatbox.core.activity.constants import DEFAULT_ACTIVITY_LIMIT, DEFAULT_WINDOW_DAYS
from beatbox.core.activity.models import ActivityEvent
from beatbox.core.utils.pagination import MAX_LIMIT
from beatbox.core.utils.schemas import CamelModel, WindowQuery


class ActivityCreateRequest(CamelModel):
    user_id: Optional[str] = None
    activity_type: Optional[str] = None
    email: Optional[str] = None
    page_url: Optional[str] = None
    action: Optional[str] = None
    session_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ActivityListQuery(WindowQuery):
    user_id: Optional[str] = None
    activity_type: Optional[str] = None
    days: int = Field(default=DEFAULT_WINDOW_DAYS, ge=1)
    limit: int = Field(default=DEFAULT_ACTIVITY_LIMIT, ge=1, le=MAX_LIMIT)
    offset: int = Field(default=0, ge=0)


class ActivityResponse(CamelModel):
    id: str
    user_id: str
    activity_type: str
    timestamp: datetime
    email: Optional[str] = None
    page_url: Optional[str] = None
    action: Optional[str] = None
    session_id: Optional[str] = None
    metadata: Dict[str, Any] = {}


def serialize_activity(event: ActivityEvent) -> dict:
    return ActivityResponse(
        id=event.id,
        user_id=event.user_id,
        activity_type=event.activity_type,
        timestamp=event.timestamp,
        email=event.email,
        page_url=event.page_url,
        action=event.action,
        session_id=event.session_id,
        metadata=event.details or {},
    ).to_json()
