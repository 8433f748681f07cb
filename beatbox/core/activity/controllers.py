"""Activity ledger HTTP controllers (producer ingestion)."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from beatbox.core.activity.schemas import ActivityCreateRequest, serialize_activity
from beatbox.core.activity.services import record_activity
from beatbox.core.utils.decorators import require_identity
from beatbox.core.utils.validation import MissingFieldsError, jsonable_errors

activity_api_bp = Blueprint("activity_api", __name__)


@activity_api_bp.post("")
@require_identity
def track_activity():
    payload = request.get_json(silent=True) or {}
    try:
        data = ActivityCreateRequest.model_validate(payload)
    except ValidationError as exc:
        return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400
    try:
        event = record_activity(
            data.user_id,
            data.activity_type,
            data.metadata,
            email=data.email,
            page_url=data.page_url,
            action=data.action,
            session_id=data.session_id,
        )
    except MissingFieldsError as exc:
        return (
            jsonify({"ok": False, "error": "missing_fields", "fields": [to_camel(f) for f in exc.fields]}),
            400,
        )
    return jsonify({"ok": True, "success": True, "activity": serialize_activity(event)})
