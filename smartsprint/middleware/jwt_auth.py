"""
JWT Auth Middleware - resolves ``Authorization: Bearer <token>`` to a user.

Runs before every request and sets:
    g.current_user     - the User row for a valid token, else None
    g.current_user_id  - its id (kept for logging after the row is gone)

Fails closed: a malformed, expired, wrongly-signed or wrong-type token, or
one whose user no longer exists, leaves g.current_user as None. Routes
protected by ``login_required`` then answer 401. There is no other way to
become authenticated.
"""

import logging

import jwt as pyjwt
from flask import g, request

from smartsprint.models import db
from smartsprint.models.auth import User
from smartsprint.services.jwt_service import decode_access_token

logger = logging.getLogger(__name__)


def _bearer_token():
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def init_jwt_middleware(app):
    """Register JWT middleware as a before_request hook."""

    @app.before_request
    def _jwt_auth():
        g.current_user = None
        g.current_user_id = None
        g.token_error = None

        token = _bearer_token()
        if token is None:
            return

        try:
            payload = decode_access_token(token)
        except pyjwt.ExpiredSignatureError:
            g.token_error = "Token expired"
            return
        except pyjwt.InvalidTokenError as exc:
            logger.debug("Rejected bearer token: %s", exc)
            g.token_error = "Invalid token"
            return

        user = db.session.get(User, payload["user_id"])
        if user is None:
            g.token_error = "User not found"
            return
        g.current_user = user
        g.current_user_id = user.id
