"""Session ledger HTTP controllers."""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from beatbox.core.auth.gate import evaluate
from beatbox.core.sessions.schemas import SessionCreateRequest, serialize_session
from beatbox.core.sessions.services import record_sign_in
from beatbox.core.utils.decorators import require_identity
from beatbox.core.utils.validation import MissingFieldsError, jsonable_errors

logger = logging.getLogger(__name__)

session_api_bp = Blueprint("session_api", __name__)


@session_api_bp.post("")
@require_identity
def create_session():
    payload = request.get_json(silent=True) or {}
    try:
        data = SessionCreateRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400

    # Every recorded session email must pass the gate at creation time.
    if data.email:
        decision = evaluate(data.email)
        if not decision.allowed:
            return jsonify({"ok": False, "error": "access_denied", "message": decision.reason}), 403

    try:
        record = record_sign_in(data.user_id, data.email, data.ip_address, data.user_agent)
    except MissingFieldsError as exc:
        fields = [to_camel(name) for name in exc.fields]
        return (
            jsonify(
                {
                    "ok": False,
                    "error": "missing_fields",
                    "fields": fields,
                    "message": f"Missing required fields: {', '.join(fields)}",
                }
            ),
            400,
        )
    logger.info("session recorded user_id=%s session_id=%s", record.user_id, record.id)
    return jsonify({"ok": True, "success": True, "session": serialize_session(record)})
