"""
Projects Blueprint.

  GET    /api/projects
  GET    /api/projects/<id>            - includes task summaries
  POST   /api/projects
  PUT    /api/projects/<id>
  DELETE /api/projects/<id>            - Admin only, removes tasks too
  GET    /api/projects/status/<status>
"""

from flask import Blueprint, jsonify

from smartsprint.blueprints import json_body
from smartsprint.middleware.permission_required import current_user, login_required
from smartsprint.services import project_service

projects_bp = Blueprint("projects_bp", __name__, url_prefix="/api/projects")


@projects_bp.route("", methods=["GET"])
@login_required
def list_projects():
    return jsonify([p.to_dict() for p in project_service.list_projects()]), 200


@projects_bp.route("/<int:project_id>", methods=["GET"])
@login_required
def get_project(project_id):
    project = project_service.get_project(project_id)
    return jsonify(project.to_dict(include_tasks=True)), 200


@projects_bp.route("", methods=["POST"])
@login_required
def create_project():
    project = project_service.create_project(current_user(), json_body())
    return jsonify(project.to_dict()), 201


@projects_bp.route("/<int:project_id>", methods=["PUT"])
@login_required
def update_project(project_id):
    project = project_service.update_project(current_user(), project_id, json_body())
    return jsonify(project.to_dict()), 200


@projects_bp.route("/<int:project_id>", methods=["DELETE"])
@login_required
def delete_project(project_id):
    project_service.delete_project(current_user(), project_id)
    return jsonify({"message": "Project deleted successfully"}), 200


@projects_bp.route("/status/<status>", methods=["GET"])
@login_required
def projects_by_status(status):
    return jsonify([p.to_dict() for p in project_service.list_projects_by_status(status)]), 200
