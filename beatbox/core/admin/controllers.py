"""Admin-only ledger queries and aggregates."""

from __future__ import annotations

from datetime import datetime

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_current_user
from pydantic import ValidationError

from beatbox.core.activity.schemas import ActivityListQuery, serialize_activity
from beatbox.core.activity.services import list_activity
from beatbox.core.admin.services import admin_health, list_users_with_stats
from beatbox.core.sessions.schemas import SessionListQuery, serialize_session
from beatbox.core.sessions.services import list_sessions
from beatbox.core.users.schemas import UserWithStatsResponse
from beatbox.core.utils.decorators import require_admin
from beatbox.core.utils.validation import jsonable_errors

admin_api_bp = Blueprint("admin_api", __name__)


def _bad_query(exc: ValidationError):
    return jsonify({"ok": False, "error": "validation_error", "details": jsonable_errors(exc)}), 400


@admin_api_bp.get("/activity")
@require_admin
def get_activity():
    try:
        query = ActivityListQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _bad_query(exc)
    activities = list_activity(
        user_id=query.user_id,
        activity_type=query.activity_type,
        since_days=query.days,
        limit=query.limit,
        offset=query.offset,
    )
    return jsonify({"ok": True, "activities": [serialize_activity(event) for event in activities]})


@admin_api_bp.get("/sessions")
@require_admin
def get_sessions():
    try:
        query = SessionListQuery.model_validate(request.args.to_dict())
    except ValidationError as exc:
        return _bad_query(exc)
    sessions = list_sessions(user_id=query.user_id, limit=query.limit, offset=query.offset)
    return jsonify({"ok": True, "sessions": [serialize_session(record) for record in sessions]})


@admin_api_bp.get("/users")
@require_admin
def get_users():
    users = [
        UserWithStatsResponse(
            id=row.identity.id,
            email=row.identity.email,
            name=row.identity.name,
            avatar_ref=row.identity.avatar_ref,
            created_at=row.identity.created_at,
            updated_at=row.identity.updated_at,
            total_sessions=row.total_sessions,
            last_sign_in=row.last_sign_in,
            total_activity=row.total_activity,
            last_activity=row.last_activity,
        ).to_json()
        for row in list_users_with_stats()
    ]
    return jsonify({"ok": True, "users": users})


@admin_api_bp.get("/health")
@require_admin
def get_health():
    identity = get_current_user()
    return jsonify(
        {
            "ok": True,
            "status": "healthy",
            "message": "Admin API is working correctly",
            "email": identity.email,
            "isAdmin": True,
            "database": admin_health(),
            "timestamp": datetime.utcnow().isoformat(),
        }
    )
