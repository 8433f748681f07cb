"""Typed schemas for identity IO."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from beatbox.core.utils.schemas import CamelModel

if TYPE_CHECKING:
    from beatbox.core.users.models import Identity


class IdentityResponse(CamelModel):
    # Persisted emails are not re-validated; the gate already decided on them.
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_ref: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserWithStatsResponse(IdentityResponse):
    total_sessions: int = 0
    last_sign_in: Optional[datetime] = None
    total_activity: int = 0
    last_activity: Optional[datetime] = None


def serialize_identity(identity: "Identity") -> dict:
    return IdentityResponse(
        id=identity.id,
        email=identity.email,
        name=identity.name,
        avatar_ref=identity.avatar_ref,
        created_at=identity.created_at,
        updated_at=identity.updated_at,
    ).to_json()
