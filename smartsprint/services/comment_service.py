"""
Comment Service - comments on tasks.

Any authenticated user may comment; edits are limited to the author (and
Admin), deletes to the author, Admin and Project Manager.
"""

import logging

from smartsprint.core.exceptions import ValidationError
from smartsprint.core.policy import Action, Target, enforce
from smartsprint.models import db
from smartsprint.models.activity import Comment
from smartsprint.models.project import Task
from smartsprint.utils.helpers import commit_or_raise, get_or_404

logger = logging.getLogger(__name__)


def _clean_content(content) -> str:
    if not isinstance(content, str) or not content.strip():
        raise ValidationError("Comment content is required", details={"content": "required"})
    return content.strip()


def list_comments_for_task(task_id: int) -> list[Comment]:
    """Newest first."""
    get_or_404(Task, task_id, "Task")
    return (
        Comment.query.filter_by(task_id=task_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
        .all()
    )


def create_comment(actor, task_id: int, data: dict) -> Comment:
    task = get_or_404(Task, task_id, "Task")
    enforce(actor, Action.COMMENT_CREATE)

    comment = Comment(task=task, user_id=actor.id, content=_clean_content(data.get("content")))
    db.session.add(comment)
    commit_or_raise()
    logger.info("User %s commented on task %s", actor.id, task.id)
    return comment


def update_comment(actor, comment_id: int, data: dict) -> Comment:
    comment = get_or_404(Comment, comment_id, "Comment")
    enforce(actor, Action.COMMENT_UPDATE, Target(owner_id=comment.user_id))

    comment.content = _clean_content(data.get("content"))
    commit_or_raise()
    return comment


def delete_comment(actor, comment_id: int) -> None:
    comment = get_or_404(Comment, comment_id, "Comment")
    enforce(actor, Action.COMMENT_DELETE, Target(owner_id=comment.user_id))
    db.session.delete(comment)
    commit_or_raise()
    logger.info("User %s deleted comment %s", actor.id, comment_id)
