"""
Rate limiting configuration.

Applies per-blueprint limits using Flask-Limiter. The Limiter instance is
created in smartsprint/__init__.py with no default limits; this module
applies limits per route group:

    - auth blueprint:   LOGIN_RATE_LIMIT  (default 10/minute per IP)
    - write blueprints: WRITE_RATE_LIMIT  (default 60/minute per IP)
    - health:           exempt

Rate limiting is disabled in testing mode.
"""

import logging

logger = logging.getLogger(__name__)

WRITE_BLUEPRINTS = ("users_bp", "projects_bp", "tasks_bp", "comments_bp")


def init_rate_limits(app, limiter):
    """Apply rate limits to API blueprints."""

    if app.config.get("TESTING"):
        app.logger.info("Rate limiter disabled (TESTING=True)")
        return

    login_limit = app.config["LOGIN_RATE_LIMIT"]
    write_limit = app.config["WRITE_RATE_LIMIT"]

    bp = app.blueprints.get("auth_bp")
    if bp:
        limiter.limit(login_limit, methods=["POST"])(bp)

    for bp_name in WRITE_BLUEPRINTS:
        bp = app.blueprints.get(bp_name)
        if bp:
            limiter.limit(write_limit, methods=["POST", "PUT", "DELETE"])(bp)

    bp = app.blueprints.get("health_bp")
    if bp:
        limiter.exempt(bp)

    app.logger.info("Rate limiter configured - auth: %s, write: %s", login_limit, write_limit)
