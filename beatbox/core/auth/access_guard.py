"""Per-request gate enforcement.

Provider credentials can outlive allowlist changes, and credentials can be
issued without going through sign-in completion, so every request that carries
credentials is re-checked here independently of the sign-in decision.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request

from beatbox.core.auth.gate import evaluate
from beatbox.core.auth.provider import current_identity, sign_out

logger = logging.getLogger(__name__)

# Endpoints that render nothing gated behind authentication.
EXEMPT_ENDPOINTS = frozenset({"health", "static", "auth_api.sign_out_route"})


def enforce_access_gate() -> Optional[Response]:
    if request.endpoint is None or request.endpoint in EXEMPT_ENDPOINTS:
        return None
    identity = current_identity()
    if identity is None:
        return None
    decision = evaluate(identity.email)
    if decision.allowed:
        return None

    logger.warning("access guard: signing out user_id=%s email=%s", identity.id, identity.email)
    response = jsonify(
        {
            "ok": False,
            "error": "access_denied",
            "email": identity.email,
            "message": decision.reason,
        }
    )
    response.status_code = 403
    # Sign-out happens before anything gated is rendered.
    return sign_out(response)


def register_access_guard(app: Flask) -> None:
    app.before_request(enforce_access_gate)


__all__ = ["EXEMPT_ENDPOINTS", "enforce_access_gate", "register_access_guard"]
