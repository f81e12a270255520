"""
App-level tests

Tests cover:
  - Startup config validation (JWT secret is mandatory)
  - Health endpoints
  - Error body shape for framework errors
  - Response headers added by middleware
"""

import pytest

from smartsprint import create_app
from smartsprint.config import MIN_SECRET_LENGTH, ProductionConfig, validate_config


# ═══════════════════════════════════════════════════════════════
# Config
# ═══════════════════════════════════════════════════════════════

def _cfg(**overrides):
    cfg = {
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "JWT_SECRET_KEY": "x" * MIN_SECRET_LENGTH,
        "JWT_ACCESS_EXPIRES": 86400,
    }
    cfg.update(overrides)
    return cfg


class TestValidateConfig:
    def test_valid(self):
        validate_config(_cfg())

    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_secret(self, secret):
        with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
            validate_config(_cfg(JWT_SECRET_KEY=secret))

    def test_short_secret(self):
        with pytest.raises(RuntimeError, match="at least"):
            validate_config(_cfg(JWT_SECRET_KEY="x" * (MIN_SECRET_LENGTH - 1)))

    def test_missing_database(self):
        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            validate_config(_cfg(SQLALCHEMY_DATABASE_URI=None))

    def test_non_positive_expiry(self):
        with pytest.raises(RuntimeError, match="JWT_ACCESS_EXPIRES"):
            validate_config(_cfg(JWT_ACCESS_EXPIRES=0))


def test_create_app_refuses_to_start_without_secret(monkeypatch):
    monkeypatch.setattr(ProductionConfig, "SQLALCHEMY_DATABASE_URI", "sqlite://")
    monkeypatch.setattr(ProductionConfig, "JWT_SECRET_KEY", None)
    with pytest.raises(RuntimeError, match="JWT_SECRET_KEY"):
        create_app("production")


def test_testing_config(app):
    assert app.config["TESTING"] is True
    assert len(app.config["JWT_SECRET_KEY"]) >= MIN_SECRET_LENGTH


# ═══════════════════════════════════════════════════════════════
# Health
# ═══════════════════════════════════════════════════════════════

def test_ready(client):
    res = client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_live_checks_database(client):
    res = client.get("/api/health/live")
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "healthy"
    assert body["checks"]["database"]["status"] == "ok"


# ═══════════════════════════════════════════════════════════════
# Errors & headers
# ═══════════════════════════════════════════════════════════════

def test_unknown_route_json_404(client):
    res = client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.get_json() == {"message": "Not found", "code": "ERR_NOT_FOUND"}


def test_method_not_allowed_json(client, admin, auth_headers):
    res = client.patch("/api/projects", headers=auth_headers(admin))
    assert res.status_code == 405
    assert res.get_json()["code"] == "ERR_METHOD_NOT_ALLOWED"


def test_authorization_error_body(client, dev, auth_headers):
    res = client.post("/api/projects", json={"name": "x"}, headers=auth_headers(dev))
    assert res.status_code == 403
    assert res.get_json() == {"message": "Not authorized to create projects", "code": "ERR_FORBIDDEN"}


def test_security_and_timing_headers(client):
    res = client.get("/api/health/ready")
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "DENY"
    assert "X-Request-ID" in res.headers
    assert "X-Request-Duration-Ms" in res.headers


def test_request_id_is_echoed(client):
    res = client.get("/api/health/ready", headers={"X-Request-ID": "abc123"})
    assert res.headers["X-Request-ID"] == "abc123"
