"""
SmartSprint
Flask Application Factory.

Usage:
    from smartsprint import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, abort, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from smartsprint.commands import register_commands
from smartsprint.config import config, validate_config
from smartsprint.core.exceptions import SmartSprintError
from smartsprint.middleware.jwt_auth import init_jwt_middleware
from smartsprint.middleware.logging_config import configure_logging
from smartsprint.middleware.rate_limiter import init_rate_limits
from smartsprint.middleware.security_headers import init_security_headers
from smartsprint.middleware.timing import init_request_timing
from smartsprint.models import db
from smartsprint.utils.errors import E, api_error, code_for_status

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine  # noqa: E402


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # limits applied per blueprint
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.

    Raises:
        RuntimeError: when required settings (JWT_SECRET_KEY, database URL)
                      are missing or invalid.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])
    validate_config(app.config)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Security headers (CSP, HSTS, X-Frame-Options, etc.) ─────────────
    init_security_headers(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── JWT auth middleware (sets g.current_user) ────────────────────────
    init_jwt_middleware(app)

    # ── Request guard (Content-Type) ─────────────────────────────────────
    @app.before_request
    def _guard_request():
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            ct = request.content_type or ""
            if request.data and "json" not in ct:
                abort(415, description="Content-Type must be application/json")

    # ── Import all models so Alembic can detect them ─────────────────────
    from smartsprint.models import auth as _auth_models          # noqa: F401
    from smartsprint.models import project as _project_models    # noqa: F401
    from smartsprint.models import activity as _activity_models  # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    with app.app_context():
        db.create_all()

    # ── Blueprints ───────────────────────────────────────────────────────
    from smartsprint.blueprints.auth_bp import auth_bp
    from smartsprint.blueprints.users_bp import users_bp
    from smartsprint.blueprints.projects_bp import projects_bp
    from smartsprint.blueprints.tasks_bp import tasks_bp
    from smartsprint.blueprints.comments_bp import comments_bp
    from smartsprint.blueprints.performance_bp import performance_bp
    from smartsprint.blueprints.health_bp import health_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(comments_bp)
    app.register_blueprint(performance_bp)
    app.register_blueprint(health_bp)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(SmartSprintError)
    def handle_domain_error(e):
        if e.status_code >= 500:
            logger.error("Unhandled domain error: %s", e.message)
        return api_error(e.code, e.message, status=e.status_code, details=e.details)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        message = e.description if e.code != 404 else "Not found"
        return api_error(code_for_status(e.code), message, status=e.code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        logger.exception("Unhandled exception on %s %s", request.method, request.path)
        return api_error(E.INTERNAL, "Internal server error", status=500)

    # ── CLI commands ─────────────────────────────────────────────────────
    register_commands(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
