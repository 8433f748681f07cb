"""Identity gate: the single allow/deny decision shared by every enforcement point."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from beatbox.core.auth.allowlist import Allowlist, get_allowlist, normalize_email

logger = logging.getLogger(__name__)

NO_EMAIL_REASON = "Access denied: no email supplied."


def not_authorized_reason(email: str) -> str:
    return f"Access denied. Email {email} is not authorized to access this application."


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    email: Optional[str]
    reason: Optional[str] = None


class AccessDenied(Exception):
    """Raised by sign-in completion when the gate rejects the candidate identity."""

    def __init__(self, decision: GateDecision):
        super().__init__(decision.reason)
        self.email = decision.email
        self.reason = decision.reason


def evaluate(email: Optional[str], allowlist: Optional[Allowlist] = None) -> GateDecision:
    """Decide whether ``email`` may use the application.

    Membership is tested case-insensitively; nothing but the allowlist is
    consulted. A missing or blank email is always denied.
    """
    allowlist = allowlist if allowlist is not None else get_allowlist()
    if normalize_email(email) is None:
        logger.warning("access gate: deny (no email supplied)")
        return GateDecision(allowed=False, email=email, reason=NO_EMAIL_REASON)
    if email not in allowlist:
        logger.warning("access gate: deny email=%s", email)
        return GateDecision(allowed=False, email=email, reason=not_authorized_reason(email))
    logger.info("access gate: allow email=%s", email)
    return GateDecision(allowed=True, email=email)


def require_allowed(email: Optional[str], allowlist: Optional[Allowlist] = None) -> GateDecision:
    """Evaluate and raise AccessDenied on a deny decision."""
    decision = evaluate(email, allowlist)
    if not decision.allowed:
        raise AccessDenied(decision)
    return decision


__all__ = [
    "AccessDenied",
    "GateDecision",
    "NO_EMAIL_REASON",
    "evaluate",
    "not_authorized_reason",
    "require_allowed",
]
