"""
Closed value sets shared by models, services and the authorization policy.

Values are the exact strings exposed over the API and stored in the DB.
"""

from enum import Enum

import sqlalchemy as sa


class Role(str, Enum):
    ADMIN = "Admin"
    PROJECT_MANAGER = "Project Manager"
    DEVELOPER = "Developer"
    TESTER = "Tester"


class Team(str, Enum):
    DESIGN = "Design"
    DATABASE = "Database"
    BACKEND = "Backend"
    FRONTEND = "Frontend"
    DEVOPS = "DevOps"
    TESTER_SECURITY = "Tester/Security"
    NONE = "None"


class Level(str, Enum):
    LEAD = "Lead"
    SENIOR = "Senior"
    DEV = "Dev"
    JUNIOR = "Junior"
    NONE = "None"


class ProjectStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PLANNING = "In Planning"
    ACTIVE = "Active"
    PAUSED = "Paused"
    COMPLETED = "Completed"
    ARCHIVED = "Archived"


class TaskStatus(str, Enum):
    CREATED = "Created"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "Under Review"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    REWORK = "Rework"


PRIVILEGED_ROLES = frozenset({Role.ADMIN, Role.PROJECT_MANAGER})


def enum_column_type(enum_cls, name):
    """SQLAlchemy Enum type that stores the member *value*, not its name."""
    return sa.Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
