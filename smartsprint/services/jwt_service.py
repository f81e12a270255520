"""
JWT Service - access token generation and verification.

Access token: 24 hours (configurable via JWT_ACCESS_EXPIRES, seconds)
Algorithm:    HS256

Token payload:
{
    "sub": "<user_id>",
    "name": ..., "email": ..., "role": ..., "team": ..., "level": ...,
    "type": "access",
    "iat": <issued_at>,
    "exp": <expires_at>,
    "jti": <unique_id>
}

Verification is a pure computation (no I/O). Callers treat every
``jwt.InvalidTokenError`` as "not authenticated".
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


def _get_secret():
    """Signing key from app config. validate_config guarantees it is set."""
    return current_app.config["JWT_SECRET_KEY"]


def _get_access_expires():
    return current_app.config["JWT_ACCESS_EXPIRES"]


# ═══════════════════════════════════════════════════════════════
# Token Generation
# ═══════════════════════════════════════════════════════════════
def generate_access_token(user, issued_at: datetime | None = None) -> str:
    """Issue a signed access token for ``user``.

    ``issued_at`` defaults to now; passing it lets callers (and tests) pin
    the issue time, the expiry follows from it.
    """
    now = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role.value,
        "team": user.team.value,
        "level": user.level.value,
        "type": TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(seconds=_get_access_expires()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM)


# ═══════════════════════════════════════════════════════════════
# Token Verification
# ═══════════════════════════════════════════════════════════════
def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access token.

    Returns the payload dict on success.
    Raises jwt.InvalidTokenError (or a subclass such as ExpiredSignatureError)
    on any failure, including a wrong token type or a non-numeric subject.
    """
    payload = jwt.decode(
        token,
        _get_secret(),
        algorithms=[ALGORITHM],
        options={"require": ["exp", "iat", "sub"]},
    )
    if payload.get("type") != TOKEN_TYPE:
        raise jwt.InvalidTokenError(f"Expected {TOKEN_TYPE} token, got {payload.get('type')}")
    try:
        payload["user_id"] = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise jwt.InvalidTokenError("Token subject is not a user id") from exc
    return payload


def token_response(user) -> dict:
    """Body returned by login and register."""
    return {
        "user": user.to_dict(),
        "token": generate_access_token(user),
        "token_type": "Bearer",
        "expires_in": _get_access_expires(),
    }
