"""
Performance Blueprint - time logs and analytics (read-only).

  GET /api/performance/user/<id>/logs
  GET /api/performance/task/<id>/logs
  GET /api/performance/project/<id>/logs
  GET /api/performance/user/<id>/analytics
  GET /api/performance/team/<team>/analytics
  GET /api/performance/ai/recommendations
"""

from flask import Blueprint, jsonify

from smartsprint.core.policy import Action
from smartsprint.middleware.permission_required import current_user, login_required, require_action
from smartsprint.services import performance_service

performance_bp = Blueprint("performance_bp", __name__, url_prefix="/api/performance")


@performance_bp.route("/user/<int:user_id>/logs", methods=["GET"])
@login_required
def user_logs(user_id):
    logs = performance_service.user_logs(current_user(), user_id)
    return jsonify([log.to_dict(include_task=True) for log in logs]), 200


@performance_bp.route("/task/<int:task_id>/logs", methods=["GET"])
@login_required
def task_logs(task_id):
    logs = performance_service.task_logs(task_id)
    return jsonify([log.to_dict(include_user=True) for log in logs]), 200


@performance_bp.route("/project/<int:project_id>/logs", methods=["GET"])
@login_required
def project_logs(project_id):
    logs = performance_service.project_logs(project_id)
    return jsonify([log.to_dict(include_user=True, include_task=True) for log in logs]), 200


@performance_bp.route("/user/<int:user_id>/analytics", methods=["GET"])
@login_required
def user_analytics(user_id):
    return jsonify(performance_service.user_analytics(current_user(), user_id)), 200


@performance_bp.route("/team/<path:team>/analytics", methods=["GET"])
@login_required
def team_analytics(team):
    return jsonify(performance_service.team_analytics(current_user(), team)), 200


@performance_bp.route("/ai/recommendations", methods=["GET"])
@login_required
@require_action(Action.VIEW_RECOMMENDATIONS)
def ai_recommendations():
    return jsonify(performance_service.recommendations()), 200
