"""
Auth Blueprint - login, self-registration and the caller's own account.

  POST /api/auth/login            - email + password → {user, token}
  POST /api/auth/register         - Developer/Tester sign-up → {user, token}
  GET  /api/auth/profile          - current user
  POST /api/auth/change-password  - {current_password, new_password}
                                    (camelCase currentPassword/newPassword also accepted)
"""

from flask import Blueprint, jsonify

from smartsprint.blueprints import json_body
from smartsprint.middleware.permission_required import current_user, login_required
from smartsprint.services.jwt_service import token_response
from smartsprint.services.user_service import (
    authenticate_user,
    change_password,
    register_user,
)

auth_bp = Blueprint("auth_bp", __name__, url_prefix="/api/auth")


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/login
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate with email + password.

    Body: { "email": "...", "password": "..." }
    """
    data = json_body()
    user = authenticate_user(data.get("email"), data.get("password"))
    return jsonify(token_response(user)), 200


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/register
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Public sign-up. Admin and Project Manager accounts are created by an
    Admin through /api/users instead.

    Body: { "name", "email", "password", "role"?, "team"?, "level"? }
    """
    user = register_user(json_body())
    return jsonify(token_response(user)), 201


@auth_bp.route("/profile", methods=["GET"])
@login_required
def profile():
    return jsonify(current_user().to_dict()), 200


@auth_bp.route("/change-password", methods=["POST"])
@login_required
def change_password_route():
    data = json_body()
    current = data.get("current_password", data.get("currentPassword"))
    new = data.get("new_password", data.get("newPassword"))
    change_password(current_user(), current, new)
    return jsonify({"message": "Password changed successfully"}), 200
