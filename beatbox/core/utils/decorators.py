"""Reusable decorators for controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, TypeVar

from flask import jsonify

from beatbox.core.admin.services import is_administrator
from beatbox.core.auth.provider import current_identity

F = TypeVar("F", bound=Callable)

logger = logging.getLogger(__name__)


def require_identity(fn: F) -> F:
    """Reject requests without resolvable provider credentials (401)."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        if current_identity() is None:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_admin(fn: F) -> F:
    """401 without an identity, 403 for any identity that is not an administrator."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        identity = current_identity()
        if identity is None:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        if not is_administrator(identity.email):
            logger.warning("admin check: forbidden email=%s", identity.email)
            return jsonify({"ok": False, "error": "forbidden"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
