"""
Task Service - task CRUD, filters and time logging.

Business rules:
    - project_id must reference an existing Project; assigned_to, when set,
      an existing User. Both are reported as NotFound (404).
    - A Developer/Tester may only change the status of a task assigned to
      them; any other key in the payload is a denial (see core.policy).
    - Time is logged as a positive whole number of minutes and appended as
      a PerformanceLog; logs are never edited.
"""

import logging

from smartsprint.core.exceptions import ValidationError
from smartsprint.core.policy import Action, Target, enforce
from smartsprint.models import db
from smartsprint.models.activity import PerformanceLog
from smartsprint.models.auth import User
from smartsprint.models.enums import TaskStatus
from smartsprint.models.project import Project, Task
from smartsprint.utils.helpers import MAX_DB_INT, commit_or_raise, get_or_404, id_in_range, parse_enum

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255
MAX_TIME_SPENT = MAX_DB_INT


# ── Validation helpers ────────────────────────────────────────────────────────


def _clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required", details={"title": "required"})
    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            f"Title must be at most {MAX_TITLE_LENGTH} characters",
            details={"title": "too long"},
        )
    return title


def _clean_description(description):
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string", details={"description": "invalid"})
    return description


def _is_ascii_digits(value: str) -> bool:
    # str.isdigit also accepts superscripts and other scripts int() rejects
    return value.isascii() and value.isdigit()


def _parse_id(value, field) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", details={field: "invalid"})
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _is_ascii_digits(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{field} must be an integer", details={field: "invalid"})


def _resolve_assignee(value):
    """None clears the assignment; anything else must be an existing user id."""
    if value is None:
        return None
    user_id = _parse_id(value, "assigned_to")
    get_or_404(User, user_id, "Assigned user")
    return user_id


def parse_time_spent(value) -> int:
    """Minutes as a positive integer. Numeric strings are accepted."""
    if isinstance(value, bool) or value is None:
        raise ValidationError("Valid time spent is required (positive number)")
    if isinstance(value, str):
        value = value.strip()
        if not _is_ascii_digits(value):
            raise ValidationError("Valid time spent is required (positive number)")
        value = int(value)
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValidationError("Time spent must be a whole number of minutes")
        value = int(value)
    elif not isinstance(value, int):
        raise ValidationError("Valid time spent is required (positive number)")
    if value <= 0:
        raise ValidationError("Valid time spent is required (positive number)")
    if value > MAX_TIME_SPENT:
        raise ValidationError(
            f"Time spent must be at most {MAX_TIME_SPENT} minutes",
            details={"time_spent": "too large"},
        )
    return value


# ── Queries ───────────────────────────────────────────────────────────────────


def list_tasks() -> list[Task]:
    return Task.query.order_by(Task.id).all()


def get_task(task_id: int) -> Task:
    return get_or_404(Task, task_id, "Task")


def list_tasks_by_project(project_id: int) -> list[Task]:
    if not id_in_range(project_id):
        return []
    return Task.query.filter_by(project_id=project_id).order_by(Task.id).all()


def list_tasks_by_user(user_id: int) -> list[Task]:
    if not id_in_range(user_id):
        return []
    return Task.query.filter_by(assigned_to=user_id).order_by(Task.id).all()


def list_tasks_by_status(status_value: str) -> list[Task]:
    status = parse_enum(TaskStatus, status_value, "status")
    return Task.query.filter_by(status=status).order_by(Task.id).all()


# ── Mutations ─────────────────────────────────────────────────────────────────


def create_task(actor, data: dict) -> Task:
    """Create a task; status defaults to Created."""
    enforce(actor, Action.TASK_CREATE)

    if data.get("project_id") is None or not data.get("title"):
        raise ValidationError("Project ID and title are required")
    project_id = _parse_id(data["project_id"], "project_id")
    title = _clean_title(data["title"])
    description = _clean_description(data.get("description"))
    status = parse_enum(TaskStatus, data.get("status") or TaskStatus.CREATED, "status")

    project = get_or_404(Project, project_id, "Project")
    assigned_to = _resolve_assignee(data.get("assigned_to"))

    task = Task(
        project=project,
        title=title,
        description=description,
        status=status,
        assigned_to=assigned_to,
    )
    db.session.add(task)
    commit_or_raise()
    logger.info("User %s created task %s in project %s", actor.id, task.id, project.id)
    return task


def update_task(actor, task_id: int, data: dict) -> Task:
    """Apply a partial update. Only keys present in ``data`` change."""
    task = get_task(task_id)
    enforce(
        actor,
        Action.TASK_UPDATE,
        Target(owner_id=task.assigned_to, fields=frozenset(data)),
    )

    changes = {}
    if "title" in data:
        changes["title"] = _clean_title(data["title"])
    if "description" in data:
        changes["description"] = _clean_description(data["description"])
    if data.get("status") is not None:
        changes["status"] = parse_enum(TaskStatus, data["status"], "status")
    if "assigned_to" in data:
        changes["assigned_to"] = _resolve_assignee(data["assigned_to"])

    for key, val in changes.items():
        setattr(task, key, val)
    commit_or_raise()
    return task


def delete_task(actor, task_id: int) -> None:
    task = get_task(task_id)
    enforce(actor, Action.TASK_DELETE)
    db.session.delete(task)
    commit_or_raise()
    logger.info("User %s deleted task %s", actor.id, task_id)


def log_time(actor, task_id: int, time_spent) -> PerformanceLog:
    """Append a PerformanceLog for ``actor`` on the task.

    Input is validated first (400), then the task is looked up (404), then
    the policy runs (403). Nothing is written unless all three pass.
    """
    minutes = parse_time_spent(time_spent)
    task = get_task(task_id)
    enforce(actor, Action.TASK_LOG_TIME, Target(owner_id=task.assigned_to))

    log = PerformanceLog(user_id=actor.id, task=task, time_spent=minutes)
    db.session.add(log)
    commit_or_raise()
    logger.info("User %s logged %d min on task %s", actor.id, minutes, task.id)
    return log
