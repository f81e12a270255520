"""
SmartSprint
Account model.

Models:
    - User: a person who signs in; Role drives every permission decision,
      Team and Level are informational.
"""

from datetime import datetime, timezone

from smartsprint.models import db
from smartsprint.models.enums import Level, Role, Team, enum_column_type


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False, unique=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(
        enum_column_type(Role, "user_role"), nullable=False, default=Role.DEVELOPER,
    )
    team = db.Column(
        enum_column_type(Team, "user_team"), nullable=False, default=Team.NONE,
    )
    level = db.Column(
        enum_column_type(Level, "user_level"), nullable=False, default=Level.NONE,
    )
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("ix_users_role", "role"),
        db.Index("ix_users_team", "team"),
    )

    # ── Relationships ────────────────────────────────────────────────────
    assigned_tasks = db.relationship(
        "Task", back_populates="assignee", lazy="dynamic",
        passive_deletes=True,
    )
    comments = db.relationship(
        "Comment", back_populates="author", lazy="dynamic",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    performance_logs = db.relationship(
        "PerformanceLog", back_populates="user", lazy="dynamic",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "team": self.team.value,
            "level": self.level.value,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_summary(self):
        """Compact form embedded in tasks, comments and logs."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "team": self.team.value,
            "level": self.level.value,
        }

    def __repr__(self):
        return f"<User {self.id}: {self.email} ({self.role.value})>"
