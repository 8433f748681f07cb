"""Opaque identifiers for ledger rows."""

from __future__ import annotations

import secrets


def new_id() -> str:
    return secrets.token_urlsafe(16)
