"""JSON error bodies shared by every error handler.

Body shape::

    {"message": "Task not found", "code": "ERR_NOT_FOUND"}
    {"message": "Invalid role 'x'", "code": "ERR_VALIDATION_INVALID",
     "details": {"role": "Must be one of: ..."}}

``message`` is what the client shows; ``code`` is stable and meant for
programmatic checks.
"""

from __future__ import annotations

from flask import jsonify


class E:
    """Machine-readable error codes (``ERR_`` prefix)."""

    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"   # 400
    UNAUTHENTICATED = "ERR_UNAUTHENTICATED"         # 401
    FORBIDDEN = "ERR_FORBIDDEN"                     # 403
    NOT_FOUND = "ERR_NOT_FOUND"                     # 404
    METHOD_NOT_ALLOWED = "ERR_METHOD_NOT_ALLOWED"   # 405
    PAYLOAD_TOO_LARGE = "ERR_PAYLOAD_TOO_LARGE"     # 413
    UNSUPPORTED_MEDIA = "ERR_UNSUPPORTED_MEDIA"     # 415
    RATE_LIMITED = "ERR_RATE_LIMITED"               # 429
    INTERNAL = "ERR_INTERNAL"                       # 500


_STATUS_TO_CODE: dict[int, str] = {
    400: E.VALIDATION_INVALID,
    401: E.UNAUTHENTICATED,
    403: E.FORBIDDEN,
    404: E.NOT_FOUND,
    405: E.METHOD_NOT_ALLOWED,
    413: E.PAYLOAD_TOO_LARGE,
    415: E.UNSUPPORTED_MEDIA,
    429: E.RATE_LIMITED,
    500: E.INTERNAL,
}

_CODE_TO_STATUS = {code: status for status, code in _STATUS_TO_CODE.items()}


def code_for_status(status: int) -> str:
    """Error code for a bare HTTP status (werkzeug exceptions)."""
    if status in _STATUS_TO_CODE:
        return _STATUS_TO_CODE[status]
    return E.INTERNAL if status >= 500 else E.VALIDATION_INVALID


def api_error(code: str, message: str, *, status: int | None = None, details: dict | None = None):
    """Return ``(response, status)`` for a Flask view or error handler.

    ``status`` defaults to the one registered for ``code``; ``details`` is
    only included when non-empty.
    """
    body: dict = {"message": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or _CODE_TO_STATUS.get(code, 400)
