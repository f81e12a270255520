"""
Route guards built on the JWT middleware and the authorization policy.

Usage:
    @bp.route("/api/projects", methods=["GET"])
    @login_required
    def list_projects():
        ...

    @bp.route("/api/performance/team/<team>/analytics", methods=["GET"])
    @login_required
    @require_action(Action.VIEW_TEAM_PERFORMANCE)
    def team_analytics(team):
        ...

``require_action`` is only for role-only actions (no resource needed);
resource-dependent checks call ``policy.enforce`` in the service layer
after the resource has been loaded.
"""

import functools

from flask import g

from smartsprint.core.exceptions import AuthenticationError
from smartsprint.core.policy import Action, enforce


def current_user():
    """The authenticated user or AuthenticationError."""
    user = getattr(g, "current_user", None)
    if user is None:
        raise AuthenticationError(getattr(g, "token_error", None) or "Authentication required")
    return user


def login_required(f):
    """Decorator: reject the request with 401 unless a valid token was sent."""
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        current_user()
        return f(*args, **kwargs)
    return decorated


def require_action(action: Action):
    """Decorator: enforce a role-only policy action before the view runs."""
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            enforce(current_user(), action)
            return f(*args, **kwargs)
        return decorated
    return decorator
