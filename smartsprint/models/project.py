"""
SmartSprint
Project domain models.

Models:
    - Project: top-level container of work; owns its Tasks (cascade delete)
    - Task: unit of work inside a Project, optionally assigned to one User
"""

from datetime import datetime, timezone

from smartsprint.models import db
from smartsprint.models.enums import ProjectStatus, TaskStatus, enum_column_type


# ── Project ──────────────────────────────────────────────────────────────────


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(
        enum_column_type(ProjectStatus, "project_status"),
        nullable=False,
        default=ProjectStatus.NOT_STARTED,
    )
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # ── Relationships ────────────────────────────────────────────────────
    tasks = db.relationship(
        "Task", back_populates="project", lazy="dynamic",
        cascade="all, delete-orphan", order_by="Task.id",
    )

    def to_dict(self, include_tasks=False):
        result = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_tasks:
            result["tasks"] = [
                {
                    "id": t.id,
                    "title": t.title,
                    "status": t.status.value,
                    "assigned_to": t.assigned_to,
                }
                for t in self.tasks
            ]
        return result

    def __repr__(self):
        return f"<Project {self.id}: {self.name}>"


# ── Task ─────────────────────────────────────────────────────────────────────


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False,
    )
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(
        enum_column_type(TaskStatus, "task_status"),
        nullable=False,
        default=TaskStatus.CREATED,
    )
    assigned_to = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("ix_tasks_project_id", "project_id"),
        db.Index("ix_tasks_assigned_to", "assigned_to"),
        db.Index("ix_tasks_status", "status"),
    )

    # ── Relationships ────────────────────────────────────────────────────
    project = db.relationship("Project", back_populates="tasks")
    assignee = db.relationship("User", back_populates="assigned_tasks")
    comments = db.relationship(
        "Comment", back_populates="task", lazy="dynamic",
        cascade="all, delete-orphan", order_by="Comment.created_at.desc()",
    )
    performance_logs = db.relationship(
        "PerformanceLog", back_populates="task", lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def to_dict(self, include_comments=False):
        result = {
            "id": self.id,
            "project_id": self.project_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "assigned_to": self.assigned_to,
            "assignee": self._assignee_dict(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_comments:
            result["comments"] = [c.to_dict() for c in self.comments]
        return result

    def _assignee_dict(self):
        if self.assignee is None:
            return None
        return {
            "id": self.assignee.id,
            "name": self.assignee.name,
            "email": self.assignee.email,
            "role": self.assignee.role.value,
            "team": self.assignee.team.value,
            "level": self.assignee.level.value,
        }

    def __repr__(self):
        return f"<Task {self.id}: {self.title}>"
