"""Per-request re-check of the allowlist for credentialed requests."""

from __future__ import annotations

import pytest

from conftest import auth_headers, make_identity

from beatbox.core.sessions.models import SessionRecord
from beatbox.extensions import db

pytestmark = pytest.mark.integration


def test_allowlisted_identity_passes(client, member):
    resp = client.get("/auth/me", headers=auth_headers(member))

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["ok"] is True
    assert body["user"]["email"] == "member@beatbox.test"
    assert body["isAdmin"] is False


def test_identity_removed_from_allowlist_is_signed_out(client, app):
    # Credentials issued for an address that is not (or no longer) approved.
    stale = make_identity("former@beatbox.test")

    resp = client.get("/auth/me", headers=auth_headers(stale))

    assert resp.status_code == 403
    body = resp.get_json()
    assert body["error"] == "access_denied"
    assert body["email"] == "former@beatbox.test"
    assert "former@beatbox.test" in body["message"]
    cookies = resp.headers.getlist("Set-Cookie")
    assert any(cookie.startswith("access_token_cookie=;") for cookie in cookies)


def test_denied_identity_cannot_reach_any_gated_endpoint(client, app):
    stale = make_identity("former@beatbox.test")

    resp = client.post(
        "/sessions",
        json={"userId": stale.id, "email": "member@beatbox.test"},
        headers=auth_headers(stale),
    )

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "access_denied"
    assert db.session.query(SessionRecord).count() == 0


def test_identity_without_email_is_denied(client, app):
    nameless = make_identity("placeholder@beatbox.test", identity_id="no-email")
    nameless.email = None
    db.session.commit()

    resp = client.get("/auth/me", headers=auth_headers(nameless))

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "access_denied"


def test_health_is_not_gated(client, app):
    stale = make_identity("former@beatbox.test")

    resp = client.get("/health", headers=auth_headers(stale))

    assert resp.status_code == 200


def test_requests_without_credentials_are_unauthorized(client, app):
    resp = client.get("/auth/me")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_invalid_token_is_treated_as_no_credentials(client, app):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401


def test_sign_out_clears_credential_cookies(client, app):
    resp = client.post("/auth/sign-out")

    assert resp.status_code == 200
    assert any(c.startswith("access_token_cookie=;") for c in resp.headers.getlist("Set-Cookie"))
