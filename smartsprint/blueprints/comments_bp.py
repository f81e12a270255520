"""
Comments Blueprint.

  GET    /api/comments/task/<task_id>   - newest first
  POST   /api/comments/task/<task_id>
  PUT    /api/comments/<id>
  DELETE /api/comments/<id>
"""

from flask import Blueprint, jsonify

from smartsprint.blueprints import json_body
from smartsprint.middleware.permission_required import current_user, login_required
from smartsprint.services import comment_service

comments_bp = Blueprint("comments_bp", __name__, url_prefix="/api/comments")


@comments_bp.route("/task/<int:task_id>", methods=["GET"])
@login_required
def list_comments(task_id):
    comments = comment_service.list_comments_for_task(task_id)
    return jsonify([c.to_dict() for c in comments]), 200


@comments_bp.route("/task/<int:task_id>", methods=["POST"])
@login_required
def create_comment(task_id):
    comment = comment_service.create_comment(current_user(), task_id, json_body())
    return jsonify(comment.to_dict()), 201


@comments_bp.route("/<int:comment_id>", methods=["PUT"])
@login_required
def update_comment(comment_id):
    comment = comment_service.update_comment(current_user(), comment_id, json_body())
    return jsonify(comment.to_dict()), 200


@comments_bp.route("/<int:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id):
    comment_service.delete_comment(current_user(), comment_id)
    return jsonify({"message": "Comment deleted successfully"}), 200
