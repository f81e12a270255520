"""
Performance Service - time-log listings and aggregate analytics.

All analytics are plain grouped SUM/AVG queries over performance_logs.
Minutes are returned as integers (SUM) or floats rounded to two decimals
(AVG). Users, tasks or projects without logs simply do not appear in the
grouped lists.
"""

import logging

from sqlalchemy import func

from smartsprint.core.policy import Action, Target, enforce
from smartsprint.models import db
from smartsprint.models.activity import PerformanceLog
from smartsprint.models.auth import User
from smartsprint.models.enums import Team
from smartsprint.models.project import Project, Task
from smartsprint.utils.helpers import get_or_404, parse_enum

logger = logging.getLogger(__name__)


def _newest_first(query):
    return query.order_by(PerformanceLog.recorded_at.desc(), PerformanceLog.id.desc())


# ═════════════════════════════════════════════════════════════════════════════
# Log listings
# ═════════════════════════════════════════════════════════════════════════════

def user_logs(actor, user_id: int) -> list[PerformanceLog]:
    user = get_or_404(User, user_id, "User")
    enforce(actor, Action.VIEW_USER_PERFORMANCE, Target(owner_id=user.id))
    return _newest_first(PerformanceLog.query.filter_by(user_id=user.id)).all()


def task_logs(task_id: int) -> list[PerformanceLog]:
    task = get_or_404(Task, task_id, "Task")
    return _newest_first(PerformanceLog.query.filter_by(task_id=task.id)).all()


def project_logs(project_id: int) -> list[PerformanceLog]:
    project = get_or_404(Project, project_id, "Project")
    return _newest_first(
        PerformanceLog.query.join(Task, PerformanceLog.task_id == Task.id)
        .filter(Task.project_id == project.id)
    ).all()


# ═════════════════════════════════════════════════════════════════════════════
# Analytics
# ═════════════════════════════════════════════════════════════════════════════

def _time_by_project(user_ids):
    rows = (
        db.session.query(
            Project.id, Project.name, func.sum(PerformanceLog.time_spent),
        )
        .select_from(PerformanceLog)
        .join(Task, PerformanceLog.task_id == Task.id)
        .join(Project, Task.project_id == Project.id)
        .filter(PerformanceLog.user_id.in_(user_ids))
        .group_by(Project.id, Project.name)
        .order_by(Project.id)
        .all()
    )
    return [
        {"project_id": pid, "project_name": name, "total_time": int(total or 0)}
        for pid, name, total in rows
    ]


def user_analytics(actor, user_id: int) -> dict:
    """Time spent by task status, by project, and the mean log entry."""
    user = get_or_404(User, user_id, "User")
    enforce(actor, Action.VIEW_USER_PERFORMANCE, Target(owner_id=user.id))

    status_rows = (
        db.session.query(Task.status, func.sum(PerformanceLog.time_spent))
        .select_from(PerformanceLog)
        .join(Task, PerformanceLog.task_id == Task.id)
        .filter(PerformanceLog.user_id == user.id)
        .group_by(Task.status)
        .all()
    )
    avg = (
        db.session.query(func.avg(PerformanceLog.time_spent))
        .filter(PerformanceLog.user_id == user.id)
        .scalar()
    )

    return {
        "user_id": user.id,
        "name": user.name,
        "role": user.role.value,
        "team": user.team.value,
        "level": user.level.value,
        "time_by_task_status": sorted(
            (
                {"status": status.value, "total_time": int(total or 0)}
                for status, total in status_rows
            ),
            key=lambda row: row["status"],
        ),
        "time_by_project": _time_by_project([user.id]),
        "avg_time_per_task": round(float(avg), 2) if avg is not None else 0,
    }


def team_analytics(actor, team_value: str) -> dict:
    """Per-member and per-project totals for every user in ``team``."""
    enforce(actor, Action.VIEW_TEAM_PERFORMANCE)
    team = parse_enum(Team, team_value, "team")

    members = User.query.filter_by(team=team).order_by(User.id).all()
    member_ids = [u.id for u in members]
    by_id = {u.id: u for u in members}

    user_rows = []
    if member_ids:
        user_rows = (
            db.session.query(PerformanceLog.user_id, func.sum(PerformanceLog.time_spent))
            .filter(PerformanceLog.user_id.in_(member_ids))
            .group_by(PerformanceLog.user_id)
            .order_by(PerformanceLog.user_id)
            .all()
        )

    return {
        "team": team.value,
        "time_by_user": [
            {
                "user_id": uid,
                "name": by_id[uid].name,
                "level": by_id[uid].level.value,
                "total_time": int(total or 0),
            }
            for uid, total in user_rows
        ],
        "time_by_project": _time_by_project(member_ids) if member_ids else [],
    }


# Static payload until a recommendation engine exists.
_PLACEHOLDER_RECOMMENDATIONS = {
    "message": "AI Task Assignment Recommendations (Placeholder)",
    "note": (
        "This is a placeholder for AI-based task assignment recommendations. "
        "A real implementation would analyze user performance data, skills "
        "and current workload to suggest optimal task assignments."
    ),
    "recommendations": [
        {
            "task_id": 1,
            "task_title": "Sample Task 1",
            "recommended_user": {
                "user_id": 3,
                "name": "John Doe",
                "reason": "Based on past performance and current workload",
            },
        },
        {
            "task_id": 2,
            "task_title": "Sample Task 2",
            "recommended_user": {
                "user_id": 4,
                "name": "Jane Smith",
                "reason": "Based on expertise in this task domain",
            },
        },
    ],
}


def recommendations() -> dict:
    """Callers gate this with Action.VIEW_RECOMMENDATIONS."""
    return _PLACEHOLDER_RECOMMENDATIONS
