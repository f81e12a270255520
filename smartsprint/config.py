"""
SmartSprint
Configuration classes for the Flask app factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
    validate_config(app.config)

There is no fallback signing key: JWT_SECRET_KEY must be provided (and be
at least MIN_SECRET_LENGTH characters) or the app refuses to start.
"""

import os

basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

_SQLITE_DEV = f"sqlite:///{os.path.join(basedir, 'instance', 'smartsprint_dev.db')}"
_SQLITE_TEST = "sqlite:///:memory:"

MIN_SECRET_LENGTH = 32


def _database_url(default=None):
    # Heroku-style postgres:// URLs are not accepted by SQLAlchemy 2.0
    raw = os.getenv("DATABASE_URL", "")
    if raw:
        return raw.replace("postgres://", "postgresql://", 1)
    return default


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY")
    DEBUG = False
    TESTING = False

    # Auth
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ACCESS_EXPIRES = int(os.getenv("JWT_ACCESS_EXPIRES", str(24 * 60 * 60)))
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
    MIN_PASSWORD_LENGTH = 8

    # SQLAlchemy
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    # Rate limiting storage (memory:// for a single process)
    RATELIMIT_STORAGE_URI = os.getenv("REDIS_URL", "memory://")
    LOGIN_RATE_LIMIT = os.getenv("LOGIN_RATE_LIMIT", "10/minute")
    WRITE_RATE_LIMIT = os.getenv("WRITE_RATE_LIMIT", "60/minute")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Request guard
    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1 MB

    # `flask init-db`
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@smartsprint.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url(_SQLITE_DEV)


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", _SQLITE_TEST)
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "testing-only-jwt-secret-key-do-not-deploy-0123456789"
    BCRYPT_ROUNDS = 4
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production environment configuration."""

    SQLALCHEMY_DATABASE_URI = _database_url()
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production

    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
    }


def validate_config(cfg):
    """Fail fast on missing or unsafe settings.

    Raises:
        RuntimeError: naming the offending setting.
    """
    if not cfg.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL environment variable is required")
    secret = cfg.get("JWT_SECRET_KEY")
    if not secret:
        raise RuntimeError("JWT_SECRET_KEY environment variable must be set")
    if len(secret) < MIN_SECRET_LENGTH:
        raise RuntimeError(
            f"JWT_SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters long"
        )
    if cfg.get("JWT_ACCESS_EXPIRES", 0) <= 0:
        raise RuntimeError("JWT_ACCESS_EXPIRES must be a positive number of seconds")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
