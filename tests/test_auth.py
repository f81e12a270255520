"""
Auth tests

Tests cover:
  - Password hashing (bcrypt)
  - JWT generation / verification / expiry boundaries
  - JWT middleware fail-closed behaviour
  - Auth API: login, register, profile, password change
"""

from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest

from smartsprint.models.auth import User
from smartsprint.models.enums import Role
from smartsprint.services.jwt_service import (
    ALGORITHM,
    decode_access_token,
    generate_access_token,
)
from smartsprint.utils.crypto import hash_password, verify_password

PASSWORD = "Secret123!"


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ═══════════════════════════════════════════════════════════════
# Password hashing
# ═══════════════════════════════════════════════════════════════

class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("correct horse", rounds=4)
        assert hashed != "correct horse"
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_verify_rejects_empty_and_garbage(self):
        assert not verify_password("", hash_password("x", rounds=4))
        assert not verify_password("x", "")
        assert not verify_password("x", "not-a-bcrypt-hash")


# ═══════════════════════════════════════════════════════════════
# Tokens
# ═══════════════════════════════════════════════════════════════

class TestTokens:
    def test_payload_carries_identity(self, dev):
        payload = decode_access_token(generate_access_token(dev))
        assert payload["user_id"] == dev.id
        assert payload["sub"] == str(dev.id)
        assert payload["role"] == "Developer"
        assert payload["team"] == "Backend"
        assert payload["level"] == "Senior"
        assert payload["email"] == dev.email
        assert payload["type"] == "access"

    def test_valid_just_before_24_hours(self, dev):
        issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
        payload = decode_access_token(generate_access_token(dev, issued_at=issued))
        assert payload["user_id"] == dev.id

    def test_expired_just_after_24_hours(self, dev):
        issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
        with pytest.raises(pyjwt.ExpiredSignatureError):
            decode_access_token(generate_access_token(dev, issued_at=issued))

    def test_wrong_signature_rejected(self, dev):
        forged = pyjwt.encode(
            {"sub": str(dev.id), "type": "access",
             "iat": datetime.now(timezone.utc),
             "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "a-completely-different-secret-of-sufficient-length",
            algorithm=ALGORITHM,
        )
        with pytest.raises(pyjwt.InvalidSignatureError):
            decode_access_token(forged)

    def test_wrong_type_rejected(self, app, dev):
        token = pyjwt.encode(
            {"sub": str(dev.id), "type": "refresh",
             "iat": datetime.now(timezone.utc),
             "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            app.config["JWT_SECRET_KEY"],
            algorithm=ALGORITHM,
        )
        with pytest.raises(pyjwt.InvalidTokenError):
            decode_access_token(token)


# ═══════════════════════════════════════════════════════════════
# Middleware
# ═══════════════════════════════════════════════════════════════

class TestAuthentication:
    def test_no_token_is_401(self, client):
        res = client.get("/api/projects")
        assert res.status_code == 401
        assert res.get_json()["message"] == "Authentication required"

    def test_malformed_token_is_401(self, client):
        res = client.get("/api/projects", headers=_bearer("not.a.jwt"))
        assert res.status_code == 401
        assert res.get_json()["message"] == "Invalid token"

    def test_non_bearer_scheme_is_401(self, client, dev):
        res = client.get(
            "/api/projects",
            headers={"Authorization": f"Token {generate_access_token(dev)}"},
        )
        assert res.status_code == 401

    def test_expired_token_is_401(self, client, dev):
        issued = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
        res = client.get("/api/projects", headers=_bearer(generate_access_token(dev, issued_at=issued)))
        assert res.status_code == 401
        assert res.get_json()["message"] == "Token expired"

    def test_token_at_23h59m_authenticates(self, client, dev):
        issued = datetime.now(timezone.utc) - timedelta(hours=23, minutes=59)
        res = client.get("/api/projects", headers=_bearer(generate_access_token(dev, issued_at=issued)))
        assert res.status_code == 200

    def test_token_for_deleted_user_is_401(self, client, dev):
        from smartsprint.models import db
        token = generate_access_token(dev)
        db.session.delete(dev)
        db.session.commit()
        res = client.get("/api/projects", headers=_bearer(token))
        assert res.status_code == 401

    def test_query_string_does_not_authenticate(self, client, dev):
        token = generate_access_token(dev)
        res = client.get(f"/api/projects?token={token}&user_id={dev.id}")
        assert res.status_code == 401


# ═══════════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════════

class TestLogin:
    def test_login_success(self, client, dev):
        res = client.post("/api/auth/login", json={"email": dev.email, "password": PASSWORD})
        assert res.status_code == 200
        data = res.get_json()
        assert data["user"]["id"] == dev.id
        assert data["user"]["role"] == "Developer"
        assert "password_hash" not in data["user"]
        assert decode_access_token(data["token"])["user_id"] == dev.id

    def test_login_is_case_insensitive_on_email(self, client, dev):
        res = client.post("/api/auth/login", json={"email": "DEV@SmartSprint.com", "password": PASSWORD})
        assert res.status_code == 200

    def test_missing_fields_400(self, client):
        res = client.post("/api/auth/login", json={"email": "dev@smartsprint.com"})
        assert res.status_code == 400

    def test_wrong_password_401(self, client, dev):
        res = client.post("/api/auth/login", json={"email": dev.email, "password": "nope-nope"})
        assert res.status_code == 401
        assert res.get_json()["message"] == "Invalid credentials"

    def test_unknown_email_401(self, client):
        res = client.post("/api/auth/login", json={"email": "ghost@smartsprint.com", "password": PASSWORD})
        assert res.status_code == 401
        assert res.get_json()["message"] == "Invalid credentials"

    @pytest.mark.parametrize("password", [12345678, ["Secret123!"], {"p": 1}])
    def test_non_string_password_400(self, client, dev, password):
        res = client.post("/api/auth/login", json={"email": dev.email, "password": password})
        assert res.status_code == 400

    def test_non_string_email_400(self, client, dev):
        res = client.post("/api/auth/login", json={"email": ["dev"], "password": PASSWORD})
        assert res.status_code == 400

    def test_overlong_password_is_just_wrong_401(self, client, dev):
        res = client.post("/api/auth/login", json={"email": dev.email, "password": "x" * 100})
        assert res.status_code == 401

    def test_non_json_body_415(self, client):
        res = client.post("/api/auth/login", data="email=x", content_type="text/plain")
        assert res.status_code == 415


# ═══════════════════════════════════════════════════════════════
# Register
# ═══════════════════════════════════════════════════════════════

class TestRegister:
    def _payload(self, **kw):
        data = {
            "name": "New Person",
            "email": "new@smartsprint.com",
            "password": "longenough",
        }
        data.update(kw)
        return data

    def test_register_developer_default(self, client):
        res = client.post("/api/auth/register", json=self._payload())
        assert res.status_code == 201
        data = res.get_json()
        assert data["user"]["role"] == "Developer"
        assert data["user"]["team"] == "None"
        assert data["token"]

    def test_register_tester_with_team(self, client):
        res = client.post(
            "/api/auth/register",
            json=self._payload(role="Tester", team="Tester/Security", level="Junior"),
        )
        assert res.status_code == 201
        assert res.get_json()["user"]["team"] == "Tester/Security"

    @pytest.mark.parametrize("role", ["Admin", "Project Manager"])
    def test_register_privileged_role_forbidden(self, client, role):
        res = client.post("/api/auth/register", json=self._payload(role=role))
        assert res.status_code == 403
        assert User.query.filter_by(email="new@smartsprint.com").first() is None

    def test_register_unknown_role_400(self, client):
        res = client.post("/api/auth/register", json=self._payload(role="Overlord"))
        assert res.status_code == 400

    def test_register_duplicate_email_400(self, client, dev):
        res = client.post("/api/auth/register", json=self._payload(email=dev.email))
        assert res.status_code == 400

    def test_register_short_password_400(self, client):
        res = client.post("/api/auth/register", json=self._payload(password="short"))
        assert res.status_code == 400

    def test_register_invalid_email_400(self, client):
        res = client.post("/api/auth/register", json=self._payload(email="not-an-email"))
        assert res.status_code == 400

    @pytest.mark.parametrize("password", ["x" * 100, "\u00e9" * 40])
    def test_register_password_over_72_bytes_400(self, client, password):
        res = client.post("/api/auth/register", json=self._payload(password=password))
        assert res.status_code == 400
        assert res.get_json()["details"] == {"password": "max 72 bytes"}
        assert User.query.filter_by(email="new@smartsprint.com").first() is None

    def test_register_password_of_72_bytes_accepted(self, client):
        res = client.post("/api/auth/register", json=self._payload(password="x" * 72))
        assert res.status_code == 201


# ═══════════════════════════════════════════════════════════════
# Profile & password change
# ═══════════════════════════════════════════════════════════════

class TestProfile:
    def test_profile(self, client, dev, auth_headers):
        res = client.get("/api/auth/profile", headers=auth_headers(dev))
        assert res.status_code == 200
        assert res.get_json()["email"] == dev.email

    def test_profile_requires_auth(self, client):
        assert client.get("/api/auth/profile").status_code == 401

    def test_change_password(self, client, dev, auth_headers):
        res = client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "brand-new-pass"},
            headers=auth_headers(dev),
        )
        assert res.status_code == 200
        login = client.post("/api/auth/login", json={"email": dev.email, "password": "brand-new-pass"})
        assert login.status_code == 200

    def test_change_password_wrong_current_401(self, client, dev, auth_headers):
        res = client.post(
            "/api/auth/change-password",
            json={"current_password": "wrong-one", "new_password": "brand-new-pass"},
            headers=auth_headers(dev),
        )
        assert res.status_code == 401

    def test_change_password_too_short_400(self, client, dev, auth_headers):
        res = client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "short"},
            headers=auth_headers(dev),
        )
        assert res.status_code == 400

    @pytest.mark.parametrize("payload", [
        {"current_password": 12345678, "new_password": "brand-new-pass"},
        {"current_password": PASSWORD, "new_password": 123456789},
    ])
    def test_change_password_non_string_400(self, client, dev, auth_headers, payload):
        res = client.post("/api/auth/change-password", json=payload, headers=auth_headers(dev))
        assert res.status_code == 400

    def test_change_password_over_72_bytes_400(self, client, dev, auth_headers):
        res = client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "x" * 73},
            headers=auth_headers(dev),
        )
        assert res.status_code == 400
        assert res.get_json()["details"] == {"new_password": "max 72 bytes"}

    def test_change_password_camel_case_keys(self, client, dev, auth_headers):
        res = client.post(
            "/api/auth/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "brand-new-pass"},
            headers=auth_headers(dev),
        )
        assert res.status_code == 200
        login = client.post("/api/auth/login", json={"email": dev.email, "password": "brand-new-pass"})
        assert login.status_code == 200


def test_role_is_closed_enum(dev):
    assert dev.role is Role.DEVELOPER
    with pytest.raises(ValueError):
        Role("Superuser")
