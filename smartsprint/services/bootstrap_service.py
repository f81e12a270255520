"""
Bootstrap Service - first-run data for ``flask init-db``.

Both steps are idempotent: the admin is only created when no user with
ADMIN_EMAIL exists, sample data only when the projects table is empty.
"""

import logging

from flask import current_app

from smartsprint.models import db
from smartsprint.models.auth import User
from smartsprint.models.enums import Level, ProjectStatus, Role, TaskStatus, Team
from smartsprint.models.project import Project, Task
from smartsprint.utils.crypto import hash_password

logger = logging.getLogger(__name__)

SAMPLE_PROJECT = {
    "name": "Sample Project",
    "description": "This is a sample project created during initialization",
    "status": ProjectStatus.ACTIVE,
}

SAMPLE_TASKS = [
    {
        "title": "Setup Development Environment",
        "description": "Install and configure necessary tools and dependencies",
        "status": TaskStatus.APPROVED,
    },
    {
        "title": "Design Database Schema",
        "description": "Create database models and relationships",
        "status": TaskStatus.IN_PROGRESS,
    },
    {
        "title": "Implement User Authentication",
        "description": "Create login and registration functionality",
        "status": TaskStatus.CREATED,
    },
]


def ensure_admin(email: str, password: str) -> tuple[User, bool]:
    """Return (admin, created). An existing account is left untouched."""
    existing = User.query.filter(db.func.lower(User.email) == email.lower()).first()
    if existing is not None:
        return existing, False

    admin = User(
        name="Admin",
        email=email,
        password_hash=hash_password(password, rounds=current_app.config["BCRYPT_ROUNDS"]),
        role=Role.ADMIN,
        team=Team.NONE,
        level=Level.NONE,
    )
    db.session.add(admin)
    db.session.commit()
    logger.info("Created default admin %s", email)
    return admin, True


def seed_sample_data() -> Project | None:
    """Create the sample project and its tasks unless any project exists."""
    if Project.query.count() > 0:
        logger.info("Projects already present, skipping sample data")
        return None

    project = Project(**SAMPLE_PROJECT)
    db.session.add(project)
    for spec in SAMPLE_TASKS:
        db.session.add(Task(project=project, **spec))
    db.session.commit()
    logger.info("Created sample project %s with %d tasks", project.id, len(SAMPLE_TASKS))
    return project
