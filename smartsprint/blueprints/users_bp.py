"""
Users Blueprint - user management.

  GET    /api/users
  GET    /api/users/<id>
  POST   /api/users
  PUT    /api/users/<id>
  DELETE /api/users/<id>
  GET    /api/users/role/<role>
  GET    /api/users/team/<team>
"""

from flask import Blueprint, jsonify

from smartsprint.blueprints import json_body
from smartsprint.middleware.permission_required import current_user, login_required
from smartsprint.services import user_service

users_bp = Blueprint("users_bp", __name__, url_prefix="/api/users")


@users_bp.route("", methods=["GET"])
@login_required
def list_users():
    return jsonify([u.to_dict() for u in user_service.list_users()]), 200


@users_bp.route("/<int:user_id>", methods=["GET"])
@login_required
def get_user(user_id):
    return jsonify(user_service.get_user(user_id).to_dict()), 200


@users_bp.route("", methods=["POST"])
@login_required
def create_user():
    user = user_service.create_user(current_user(), json_body())
    return jsonify(user.to_dict()), 201


@users_bp.route("/<int:user_id>", methods=["PUT"])
@login_required
def update_user(user_id):
    user = user_service.update_user(current_user(), user_id, json_body())
    return jsonify(user.to_dict()), 200


@users_bp.route("/<int:user_id>", methods=["DELETE"])
@login_required
def delete_user(user_id):
    user_service.delete_user(current_user(), user_id)
    return jsonify({"message": "User deleted successfully"}), 200


@users_bp.route("/role/<path:role>", methods=["GET"])
@login_required
def users_by_role(role):
    return jsonify([u.to_dict() for u in user_service.list_users_by_role(role)]), 200


@users_bp.route("/team/<path:team>", methods=["GET"])
@login_required
def users_by_team(team):
    return jsonify([u.to_dict() for u in user_service.list_users_by_team(team)]), 200
