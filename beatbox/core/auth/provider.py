"""Identity provider adapter.

After the external social-login flow completes, the provider session is
represented by a JWT whose subject is the Identity id. This module is the only
place that issues, resolves, or clears those credentials.
"""

from __future__ import annotations

from typing import Optional

from flask import Response
from flask_jwt_extended import (
    create_access_token,
    get_current_user,
    unset_jwt_cookies,
    verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from beatbox.core.users.models import Identity
from beatbox.extensions import db, jwt


def register_identity_loader() -> None:
    """Resolve the token subject to the stored Identity row."""

    @jwt.user_lookup_loader
    def _load_identity(_jwt_header: dict, jwt_data: dict) -> Optional[Identity]:
        subject = jwt_data.get("sub")
        return db.session.get(Identity, subject) if subject else None


def issue_credentials(identity: Identity) -> dict[str, str]:
    """Create the provider session credentials for an accepted identity."""
    access_token = create_access_token(
        identity=str(identity.id),
        additional_claims={"email": identity.email},
    )
    return {"access_token": access_token}


def current_identity() -> Optional[Identity]:
    """Identity behind the request's credentials, or None when there is none.

    Invalid, expired, or orphaned tokens resolve to None rather than raising.
    """
    try:
        if verify_jwt_in_request(optional=True) is None:
            return None
    except (JWTExtendedException, PyJWTError):
        return None
    return get_current_user()


def sign_out(response: Response) -> Response:
    """Terminate the provider session carried by cookies on this response."""
    unset_jwt_cookies(response)
    return response


__all__ = ["current_identity", "issue_credentials", "register_identity_loader", "sign_out"]
