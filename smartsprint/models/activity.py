"""
SmartSprint
Task activity models.

Models:
    - Comment: free-text note left on a Task by its author
    - PerformanceLog: append-only record of minutes a User spent on a Task
"""

from datetime import datetime, timezone

from smartsprint.models import db


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(
        db.Integer, db.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False,
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.Index("ix_comments_task_id", "task_id"),
    )

    task = db.relationship("Task", back_populates="comments")
    author = db.relationship("User", back_populates="comments")

    def to_dict(self):
        return {
            "id": self.id,
            "task_id": self.task_id,
            "user_id": self.user_id,
            "content": self.content,
            "author": {
                "id": self.author.id,
                "name": self.author.name,
                "role": self.author.role.value,
                "team": self.author.team.value,
            } if self.author else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Comment {self.id} on Task {self.task_id}>"


class PerformanceLog(db.Model):
    """Time entry. Rows are only ever inserted; no update path exists."""

    __tablename__ = "performance_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    task_id = db.Column(
        db.Integer, db.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False,
    )
    time_spent = db.Column(db.Integer, nullable=False, comment="minutes, > 0")
    recorded_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.CheckConstraint("time_spent > 0", name="ck_performance_logs_time_spent_positive"),
        db.Index("ix_performance_logs_user_id", "user_id"),
        db.Index("ix_performance_logs_task_id", "task_id"),
    )

    user = db.relationship("User", back_populates="performance_logs")
    task = db.relationship("Task", back_populates="performance_logs")

    def to_dict(self, include_user=False, include_task=False):
        result = {
            "id": self.id,
            "user_id": self.user_id,
            "task_id": self.task_id,
            "time_spent": self.time_spent,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }
        if include_user and self.user is not None:
            result["user"] = self.user.to_summary()
        if include_task and self.task is not None:
            result["task"] = {
                "id": self.task.id,
                "title": self.task.title,
                "status": self.task.status.value,
                "project_id": self.task.project_id,
                "project": {
                    "id": self.task.project.id,
                    "name": self.task.project.name,
                },
            }
        return result

    def __repr__(self):
        return f"<PerformanceLog {self.id}: user={self.user_id} task={self.task_id} {self.time_spent}m>"
