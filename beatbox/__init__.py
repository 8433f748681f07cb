"""beatbox application factory and bootstrap."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import Flask

from beatbox.config import config_by_name
from beatbox.core.auth.access_guard import register_access_guard
from beatbox.core.auth.allowlist import init_access_lists
from beatbox.core.auth.provider import register_identity_loader
from beatbox.extensions import db, init_extensions


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the beatbox Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(
        __name__,
        instance_path=str(instance_root),
        instance_relative_config=True,
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and db_uri != "sqlite:///:memory:":
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        abs_path = db_path if db_path.is_absolute() else project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    init_extensions(app)
    init_access_lists(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {
            "ok": True,
            "status": "ok",
            "timestamp": datetime.utcnow().isoformat(),
            "environment": app.config.get("ENV"),
            "featureFlags": {
                "hasDatabaseUrl": bool(app.config.get("SQLALCHEMY_DATABASE_URI")),
                "hasGoogleClientId": bool(app.config.get("GOOGLE_CLIENT_ID")),
                "allowlistConfigured": bool(app.config.get("APPROVED_EMAILS")),
            },
        }, 200

    # Register CLI commands
    from beatbox.scripts.sign_in import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from beatbox.core.activity.controllers import activity_api_bp
    from beatbox.core.admin.controllers import admin_api_bp
    from beatbox.core.auth.controllers import auth_bp  # local import to avoid circulars
    from beatbox.core.sessions.controllers import session_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(session_api_bp, url_prefix="/sessions")
    app.register_blueprint(activity_api_bp, url_prefix="/track-activity")
    app.register_blueprint(admin_api_bp, url_prefix="/admin")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses; nothing escapes as an unhandled crash."""
    from sqlalchemy.exc import SQLAlchemyError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        code = (exc.name or "http_error").lower().replace(" ", "_")
        return {"ok": False, "error": code, "message": exc.description}, exc.code

    @app.errorhandler(SQLAlchemyError)
    def _store_error(exc: SQLAlchemyError):
        db.session.rollback()
        app.logger.exception("Store error: %s", exc)
        return {"ok": False, "error": "internal_error"}, 500

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Identity resolution and the per-request access guard."""
    register_identity_loader()
    register_access_guard(app)
