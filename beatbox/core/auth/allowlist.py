"""Static email allowlists (general access and administrators).

Both lists come from configuration and are frozen when the app is created;
there is no runtime mutation API.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Optional, Union

from flask import Flask, current_app

logger = logging.getLogger(__name__)

ALLOWLIST_KEY = "allowlist"
ADMIN_EMAILS_KEY = "admin_emails"

_SEPARATORS = re.compile(r"[\s,;]+")


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Return the comparison key for an email, or None when there is nothing to compare."""
    if email is None:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def parse_email_list(raw: Union[str, Iterable[str], None]) -> frozenset[str]:
    if raw is None:
        return frozenset()
    items = _SEPARATORS.split(raw) if isinstance(raw, str) else raw
    normalized = (normalize_email(item) for item in items)
    return frozenset(email for email in normalized if email)


class Allowlist:
    """Immutable set of lowercase email addresses with case-insensitive membership."""

    __slots__ = ("_emails",)

    def __init__(self, emails: Union[str, Iterable[str], None] = None) -> None:
        self._emails = parse_email_list(emails)

    def __contains__(self, email: object) -> bool:
        if not isinstance(email, str):
            return False
        normalized = normalize_email(email)
        return normalized is not None and normalized in self._emails

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._emails))

    def __len__(self) -> int:
        return len(self._emails)

    def __repr__(self) -> str:
        return f"Allowlist({len(self._emails)} emails)"

    @property
    def emails(self) -> frozenset[str]:
        return self._emails


def init_access_lists(app: Flask) -> None:
    """Freeze APPROVED_EMAILS / ADMIN_EMAILS into the app's extensions."""
    allowlist = Allowlist(app.config.get("APPROVED_EMAILS"))
    admin_emails = Allowlist(app.config.get("ADMIN_EMAILS"))
    app.extensions[ALLOWLIST_KEY] = allowlist
    app.extensions[ADMIN_EMAILS_KEY] = admin_emails

    if not len(allowlist):
        app.logger.warning("APPROVED_EMAILS is empty; every sign-in will be denied")
    # Administrators still pass through the general gate.
    outside = admin_emails.emails - allowlist.emails
    if outside:
        app.logger.warning("admin emails not in APPROVED_EMAILS will be denied: %s", sorted(outside))


def get_allowlist() -> Allowlist:
    return current_app.extensions[ALLOWLIST_KEY]


def get_admin_emails() -> Allowlist:
    return current_app.extensions[ADMIN_EMAILS_KEY]


__all__ = [
    "Allowlist",
    "normalize_email",
    "parse_email_list",
    "init_access_lists",
    "get_allowlist",
    "get_admin_emails",
]
