"""Server-side gate enforcement at sign-in completion."""

from __future__ import annotations

import pytest

from flask_jwt_extended import decode_token

from beatbox.core.activity.models import ActivityEvent
from beatbox.core.auth.allowlist import Allowlist
from beatbox.core.auth.gate import AccessDenied
from beatbox.core.auth.sign_in import EmailInUse, ProviderProfile, complete_sign_in
from beatbox.core.sessions.models import SessionRecord
from beatbox.core.users.models import Identity
from beatbox.extensions import db

pytestmark = pytest.mark.integration


def _count(model) -> int:
    return db.session.query(model).count()


def test_denied_email_creates_nothing(app):
    allowlist = Allowlist({"a@x.com"})

    with pytest.raises(AccessDenied) as excinfo:
        complete_sign_in(ProviderProfile(email="b@x.com"), allowlist=allowlist)

    assert "b@x.com" in excinfo.value.reason
    assert _count(SessionRecord) == 0
    assert _count(Identity) == 0
    assert _count(ActivityEvent) == 0


def test_missing_email_is_rejected(app):
    with pytest.raises(AccessDenied) as excinfo:
        complete_sign_in(ProviderProfile(email=None, subject="no-email"))

    assert "no email supplied" in excinfo.value.reason
    assert _count(SessionRecord) == 0


def test_allowed_email_is_case_insensitive_and_kept_as_supplied(app):
    allowlist = Allowlist({"a@x.com"})

    result = complete_sign_in(
        ProviderProfile(email="A@X.com", name="A"),
        ip_address="10.0.0.1",
        user_agent="pytest",
        allowlist=allowlist,
    )

    sessions = db.session.query(SessionRecord).all()
    assert len(sessions) == 1
    assert sessions[0].email == "A@X.com"
    assert sessions[0].user_id == result.identity.id
    assert sessions[0].is_active is True
    assert sessions[0].ip_address == "10.0.0.1"


def test_sign_in_records_sign_in_activity(app):
    result = complete_sign_in(ProviderProfile(email="member@beatbox.test"), user_agent="pytest")

    events = db.session.query(ActivityEvent).all()
    assert len(events) == 1
    assert events[0].activity_type == "sign_in"
    assert events[0].session_id == result.session.id
    assert events[0].details["userAgent"] == "pytest"


def test_repeat_sign_in_reuses_identity(app):
    first = complete_sign_in(ProviderProfile(email="member@beatbox.test", subject="google-123"))
    second = complete_sign_in(ProviderProfile(email="Member@beatbox.test", name="Renamed"))

    assert first.identity.id == second.identity.id == "google-123"
    assert second.identity.name == "Renamed"
    assert _count(Identity) == 1
    assert _count(SessionRecord) == 2


def test_sign_in_issues_credentials_for_identity(app):
    result = complete_sign_in(ProviderProfile(email="a@x.com"))

    claims = decode_token(result.credentials["access_token"])
    assert claims["sub"] == result.identity.id
    assert claims["email"] == "a@x.com"


def test_changed_provider_email_replaces_stored_email(app):
    complete_sign_in(ProviderProfile(email="admin@beatbox.test", subject="g-7"))
    result = complete_sign_in(ProviderProfile(email="member@beatbox.test", subject="g-7"))

    stored = db.session.get(Identity, "g-7")
    assert stored.email == "member@beatbox.test"
    assert result.session.email == "member@beatbox.test"
    assert decode_token(result.credentials["access_token"])["email"] == "member@beatbox.test"


def test_former_admin_loses_admin_access_after_email_change(client):
    complete_sign_in(ProviderProfile(email="admin@beatbox.test", subject="g-7"))
    result = complete_sign_in(ProviderProfile(email="member@beatbox.test", subject="g-7"))

    resp = client.get(
        "/admin/users",
        headers={"Authorization": f"Bearer {result.credentials['access_token']}"},
    )

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"


def test_email_change_to_unlisted_address_is_denied(app):
    complete_sign_in(ProviderProfile(email="a@x.com", subject="g-8"))

    with pytest.raises(AccessDenied):
        complete_sign_in(ProviderProfile(email="gone@x.com", subject="g-8"))

    assert db.session.get(Identity, "g-8").email == "a@x.com"
    assert _count(SessionRecord) == 1


def test_case_only_email_change_keeps_stored_email(app):
    complete_sign_in(ProviderProfile(email="Member@Beatbox.test", subject="g-9"))
    complete_sign_in(ProviderProfile(email="member@beatbox.test", subject="g-9"))

    assert db.session.get(Identity, "g-9").email == "Member@Beatbox.test"


def test_email_held_by_another_identity_refuses_sign_in(app):
    complete_sign_in(ProviderProfile(email="member@beatbox.test", subject="g-1"))
    complete_sign_in(ProviderProfile(email="a@x.com", subject="g-2"))

    with pytest.raises(EmailInUse) as excinfo:
        complete_sign_in(ProviderProfile(email="Member@beatbox.test", subject="g-2"))

    db.session.rollback()
    assert excinfo.value.identity_id == "g-1"
    assert db.session.get(Identity, "g-2").email == "a@x.com"
    assert _count(SessionRecord) == 2
