"""Server-side gate enforcement at sign-in completion.

The identity provider calls ``complete_sign_in`` as the last step of its
protocol. The gate runs before anything is written: a rejected identity leaves
no Identity, SessionRecord, or ActivityEvent behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import func, select

from beatbox.core.activity.constants import ACTIVITY_SIGN_IN
from beatbox.core.activity.services import record_activity
from beatbox.core.auth.allowlist import Allowlist, normalize_email
from beatbox.core.auth.gate import require_allowed
from beatbox.core.auth.provider import issue_credentials
from beatbox.core.sessions.models import SessionRecord
from beatbox.core.sessions.services import record_sign_in
from beatbox.core.users.models import Identity
from beatbox.core.utils.ids import new_id
from beatbox.extensions import db

logger = logging.getLogger(__name__)


@dataclass
class ProviderProfile:
    """Candidate identity as handed over by the identity provider."""

    email: Optional[str]
    subject: Optional[str] = None
    name: Optional[str] = None
    avatar_ref: Optional[str] = None


@dataclass
class SignInResult:
    identity: Identity
    session: SessionRecord
    credentials: dict[str, str] = field(default_factory=dict)


class EmailInUse(Exception):
    """The provider reported an email that another identity already holds."""

    def __init__(self, email: str, identity_id: str):
        super().__init__(f"Email {email} is already registered to another account.")
        self.email = email
        self.identity_id = identity_id


def complete_sign_in(
    profile: ProviderProfile,
    *,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    allowlist: Optional[Allowlist] = None,
) -> SignInResult:
    """Accept or reject a candidate identity; on accept, record the sign-in.

    Raises:
        AccessDenied: the email is missing or not on the allowlist. The
            exception message is the user-facing reason and names the email.
        EmailInUse: a returning identity now reports an email that belongs to
            another identity. Nothing is written.
    """
    require_allowed(profile.email, allowlist)

    identity = _upsert_identity(profile)
    session = record_sign_in(identity.id, profile.email, ip_address, user_agent, commit=False)
    record_activity(
        identity.id,
        ACTIVITY_SIGN_IN,
        {"ipAddress": ip_address, "userAgent": user_agent},
        email=profile.email,
        session_id=session.id,
        commit=False,
    )
    db.session.commit()
    logger.info("sign-in completed user_id=%s session_id=%s", identity.id, session.id)

    return SignInResult(identity=identity, session=session, credentials=issue_credentials(identity))


def _upsert_identity(profile: ProviderProfile) -> Identity:
    identity = db.session.get(Identity, profile.subject) if profile.subject else None
    if identity is None:
        identity = db.session.scalars(
            select(Identity).where(func.lower(Identity.email) == normalize_email(profile.email))
        ).first()

    if identity is None:
        identity = Identity(
            id=profile.subject or new_id(),
            email=profile.email,
            name=profile.name,
            avatar_ref=profile.avatar_ref,
        )
        db.session.add(identity)
    else:
        if normalize_email(identity.email) != normalize_email(profile.email):
            _claim_email(identity, profile.email)
        if profile.name:
            identity.name = profile.name
        if profile.avatar_ref:
            identity.avatar_ref = profile.avatar_ref
    db.session.flush()
    return identity


def _claim_email(identity: Identity, email: str) -> None:
    # Later gate and admin checks read the stored email, so it follows the provider.
    holder = db.session.scalars(
        select(Identity).where(func.lower(Identity.email) == normalize_email(email), Identity.id != identity.id)
    ).first()
    if holder is not None:
        logger.warning("sign-in refused: email=%s held by user_id=%s", email, holder.id)
        raise EmailInUse(email, holder.id)
    logger.info("identity email changed user_id=%s old=%s new=%s", identity.id, identity.email, email)
    identity.email = email


__all__ = ["EmailInUse", "ProviderProfile", "SignInResult", "complete_sign_in"]
