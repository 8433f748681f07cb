"""Auth HTTP controllers (provider session introspection and sign-out)."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_current_user

from beatbox.core.admin.services import is_administrator
from beatbox.core.auth.provider import sign_out
from beatbox.core.users.schemas import serialize_identity
from beatbox.core.utils.decorators import require_identity

auth_bp = Blueprint("auth_api", __name__)


@auth_bp.get("/me")
@require_identity
def me():
    # Reaching here means the access guard has re-checked the allowlist.
    identity = get_current_user()
    return jsonify(
        {
            "ok": True,
            "user": serialize_identity(identity),
            "isAdmin": is_administrator(identity.email),
        }
    )


@auth_bp.post("/sign-out")
def sign_out_route():
    return sign_out(jsonify({"ok": True}))
