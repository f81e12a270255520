"""
Application-wide exception hierarchy.

Services raise these; the error handlers registered in ``create_app`` turn
them into ``{"message": ..., "code": ...}`` responses with the status code
carried by each class. Anything else that escapes a view is an internal
error (500).

Usage:
    from smartsprint.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError("Task", task_id)
    raise ValidationError("Title is required", details={"title": "required"})
"""

from smartsprint.utils.errors import E


class SmartSprintError(Exception):
    """Base class. ``status_code`` and ``code`` drive the HTTP response."""

    status_code = 500
    code = E.INTERNAL

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(SmartSprintError):
    """Missing or malformed input. Maps to HTTP 400."""

    status_code = 400
    code = E.VALIDATION_INVALID


class AuthenticationError(SmartSprintError):
    """Missing, malformed, expired or otherwise invalid credentials. HTTP 401."""

    status_code = 401
    code = E.UNAUTHENTICATED

    def __init__(self, message: str = "Authentication required", details: dict | None = None) -> None:
        super().__init__(message, details)


class AuthorizationError(SmartSprintError):
    """The caller is authenticated but the policy denied the action. HTTP 403."""

    status_code = 403
    code = E.FORBIDDEN

    def __init__(self, message: str = "Not authorized", details: dict | None = None) -> None:
        super().__init__(message, details)


class NotFoundError(SmartSprintError):
    """A referenced entity id does not exist. HTTP 404.

    Args:
        resource: Entity name used in the message (e.g. "Task").
        resource_id: The id that was looked up. Logged, not echoed in the body.
    """

    status_code = 404
    code = E.NOT_FOUND

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")
