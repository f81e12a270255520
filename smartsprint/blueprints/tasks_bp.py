"""
Tasks Blueprint.

  GET    /api/tasks
  GET    /api/tasks/<id>                - includes comments
  POST   /api/tasks
  PUT    /api/tasks/<id>
  DELETE /api/tasks/<id>
  GET    /api/tasks/project/<id>
  GET    /api/tasks/user/<id>
  GET    /api/tasks/status/<status>
  POST   /api/tasks/<id>/log-time       - {time_spent} minutes
"""

from flask import Blueprint, jsonify

from smartsprint.blueprints import json_body
from smartsprint.middleware.permission_required import current_user, login_required
from smartsprint.services import task_service

tasks_bp = Blueprint("tasks_bp", __name__, url_prefix="/api/tasks")


def _task_list(tasks):
    return jsonify([t.to_dict() for t in tasks]), 200


@tasks_bp.route("", methods=["GET"])
@login_required
def list_tasks():
    return _task_list(task_service.list_tasks())


@tasks_bp.route("/<int:task_id>", methods=["GET"])
@login_required
def get_task(task_id):
    task = task_service.get_task(task_id)
    return jsonify(task.to_dict(include_comments=True)), 200


@tasks_bp.route("", methods=["POST"])
@login_required
def create_task():
    task = task_service.create_task(current_user(), json_body())
    return jsonify(task.to_dict()), 201


@tasks_bp.route("/<int:task_id>", methods=["PUT"])
@login_required
def update_task(task_id):
    task = task_service.update_task(current_user(), task_id, json_body())
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/<int:task_id>", methods=["DELETE"])
@login_required
def delete_task(task_id):
    task_service.delete_task(current_user(), task_id)
    return jsonify({"message": "Task deleted successfully"}), 200


@tasks_bp.route("/project/<int:project_id>", methods=["GET"])
@login_required
def tasks_by_project(project_id):
    return _task_list(task_service.list_tasks_by_project(project_id))


@tasks_bp.route("/user/<int:user_id>", methods=["GET"])
@login_required
def tasks_by_user(user_id):
    return _task_list(task_service.list_tasks_by_user(user_id))


@tasks_bp.route("/status/<status>", methods=["GET"])
@login_required
def tasks_by_status(status):
    return _task_list(task_service.list_tasks_by_status(status))


@tasks_bp.route("/<int:task_id>/log-time", methods=["POST"])
@login_required
def log_time(task_id):
    log = task_service.log_time(current_user(), task_id, json_body().get("time_spent"))
    return jsonify(log.to_dict()), 201
