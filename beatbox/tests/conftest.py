import sys
from pathlib import Path

import os

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from flask_jwt_extended import create_access_token

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from beatbox import create_app
from beatbox.extensions import db
from beatbox.core.activity.models import ActivityEvent
from beatbox.core.sessions.models import SessionRecord
from beatbox.core.users.models import Identity

ADMIN_EMAIL = "admin@beatbox.test"
MEMBER_EMAIL = "member@beatbox.test"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


def _alembic_config() -> AlembicConfig:
    cfg = AlembicConfig(str(ROOT / "beatbox" / "migrations" / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "beatbox" / "migrations"))
    cfg.set_main_option("beatbox_env", "testing")
    cfg.attributes["configure_logger"] = False
    db_url = os.environ.get("TEST_DATABASE_URL") or "sqlite:///instance/test.db"
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


@pytest.fixture(scope="session", autouse=True)
def migrated_db():
    """Apply migrations once per session to mirror production schema."""
    cfg = _alembic_config()
    command.downgrade(cfg, "base")
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture()
def app(migrated_db):
    """Per-test app; ledger and identity rows are wiped after each test."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.rollback()
        for model in (ActivityEvent, SessionRecord, Identity):
            db.session.query(model).delete()
        db.session.commit()
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_identity(email, *, name=None, identity_id=None, created_at=None) -> Identity:
    identity = Identity(id=identity_id or email.lower(), email=email, name=name)
    if created_at is not None:
        identity.created_at = created_at
    db.session.add(identity)
    db.session.commit()
    return identity


def auth_headers(identity: Identity) -> dict[str, str]:
    token = create_access_token(identity=str(identity.id), additional_claims={"email": identity.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(app):
    return make_identity(ADMIN_EMAIL, name="Admin")


@pytest.fixture
def member(app):
    return make_identity(MEMBER_EMAIL, name="Member")
