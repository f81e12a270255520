"""
Project Service - project CRUD and status filter.

Deleting a project removes its tasks and, through them, their comments and
performance logs (ORM cascade + ON DELETE CASCADE).
"""

import logging

from smartsprint.core.exceptions import ValidationError
from smartsprint.core.policy import Action, enforce
from smartsprint.models import db
from smartsprint.models.enums import ProjectStatus
from smartsprint.models.project import Project
from smartsprint.utils.helpers import commit_or_raise, get_or_404, parse_enum

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 200


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Project name is required", details={"name": "required"})
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Project name must be at most {MAX_NAME_LENGTH} characters",
            details={"name": "too long"},
        )
    return name


def _clean_description(description):
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be a string", details={"description": "invalid"})
    return description


def list_projects() -> list[Project]:
    return Project.query.order_by(Project.id).all()


def get_project(project_id: int) -> Project:
    return get_or_404(Project, project_id, "Project")


def list_projects_by_status(status_value: str) -> list[Project]:
    status = parse_enum(ProjectStatus, status_value, "status")
    return Project.query.filter_by(status=status).order_by(Project.id).all()


def create_project(actor, data: dict) -> Project:
    """Create a project; status defaults to Not Started."""
    enforce(actor, Action.PROJECT_CREATE)

    project = Project(
        name=_clean_name(data.get("name")),
        description=_clean_description(data.get("description")),
        status=parse_enum(ProjectStatus, data.get("status") or ProjectStatus.NOT_STARTED, "status"),
    )
    db.session.add(project)
    commit_or_raise()
    logger.info("User %s created project %s", actor.id, project.id)
    return project


def update_project(actor, project_id: int, data: dict) -> Project:
    project = get_project(project_id)
    enforce(actor, Action.PROJECT_UPDATE)

    changes = {}
    if "name" in data:
        changes["name"] = _clean_name(data["name"])
    if "description" in data:
        changes["description"] = _clean_description(data["description"])
    if data.get("status") is not None:
        changes["status"] = parse_enum(ProjectStatus, data["status"], "status")

    for key, val in changes.items():
        setattr(project, key, val)
    commit_or_raise()
    return project


def delete_project(actor, project_id: int) -> None:
    project = get_project(project_id)
    enforce(actor, Action.PROJECT_DELETE)
    db.session.delete(project)
    commit_or_raise()
    logger.info("User %s deleted project %s", actor.id, project_id)
