"""
Authorization policy - the single place where ALLOW/DENY is decided.

Every guarded action is an ``Action`` member with exactly one rule in
``_RULES``. A rule receives the caller (anything with ``id`` and ``role``)
and a ``Target`` describing the resource, and returns a bool. Roles do not
inherit from each other: each rule lists the roles and identity relations
that satisfy it.

Usage:
    from smartsprint.core.policy import Action, Target, enforce

    enforce(g.current_user, Action.TASK_UPDATE,
            Target(owner_id=task.assigned_to, fields=frozenset(data)))

Lookups of the target resource happen before the call (NotFound first);
the call happens before any mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from smartsprint.core.exceptions import AuthorizationError
from smartsprint.models.enums import PRIVILEGED_ROLES, Role

logger = logging.getLogger(__name__)


class Action(str, Enum):
    PROJECT_CREATE = "project.create"
    PROJECT_UPDATE = "project.update"
    PROJECT_DELETE = "project.delete"
    TASK_CREATE = "task.create"
    TASK_UPDATE = "task.update"
    TASK_DELETE = "task.delete"
    TASK_LOG_TIME = "task.log_time"
    COMMENT_CREATE = "comment.create"
    COMMENT_UPDATE = "comment.update"
    COMMENT_DELETE = "comment.delete"
    USER_CREATE = "user.create"
    USER_UPDATE = "user.update"
    USER_DELETE = "user.delete"
    VIEW_USER_PERFORMANCE = "performance.view_user"
    VIEW_TEAM_PERFORMANCE = "performance.view_team"
    VIEW_RECOMMENDATIONS = "performance.view_recommendations"


@dataclass(frozen=True)
class Target:
    """What the action is applied to.

    owner_id:       task assignee, comment author, or the target user's id
    role:           the target user's current role (user actions only)
    requested_role: role carried in the payload (user create/update)
    fields:         payload keys (task update)
    """
    owner_id: int | None = None
    role: Role | None = None
    requested_role: Role | None = None
    fields: frozenset[str] = field(default_factory=frozenset)


NO_TARGET = Target()

# Payload keys a non-privileged assignee may send on task update.
ASSIGNEE_TASK_FIELDS = frozenset({"status"})


# ═════════════════════════════════════════════════════════════════════════════
# Rules
# ═════════════════════════════════════════════════════════════════════════════

def _is_self(caller, target: Target) -> bool:
    return target.owner_id is not None and caller.id == target.owner_id


def _admin(caller, target: Target) -> bool:
    return caller.role == Role.ADMIN


def _admin_or_pm(caller, target: Target) -> bool:
    return caller.role in PRIVILEGED_ROLES


def _anyone(caller, target: Target) -> bool:
    return True


def _admin_pm_or_self(caller, target: Target) -> bool:
    return caller.role in PRIVILEGED_ROLES or _is_self(caller, target)


def _update_task(caller, target: Target) -> bool:
    if caller.role in PRIVILEGED_ROLES:
        return True
    return _is_self(caller, target) and target.fields <= ASSIGNEE_TASK_FIELDS


def _update_comment(caller, target: Target) -> bool:
    return caller.role == Role.ADMIN or _is_self(caller, target)


def _create_user(caller, target: Target) -> bool:
    if caller.role == Role.ADMIN:
        return True
    if caller.role == Role.PROJECT_MANAGER:
        return target.requested_role not in PRIVILEGED_ROLES
    return False


def _update_user(caller, target: Target) -> bool:
    if caller.role == Role.ADMIN:
        return True
    if caller.role == Role.PROJECT_MANAGER:
        if target.requested_role in PRIVILEGED_ROLES:
            return False
        return target.role not in PRIVILEGED_ROLES or _is_self(caller, target)
    # Developer / Tester: own record only, and no role change
    if not _is_self(caller, target):
        return False
    return target.requested_role is None or target.requested_role == target.role


_RULES: dict[Action, Callable[..., bool]] = {
    Action.PROJECT_CREATE: _admin_or_pm,
    Action.PROJECT_UPDATE: _admin_or_pm,
    Action.PROJECT_DELETE: _admin,
    Action.TASK_CREATE: _admin_or_pm,
    Action.TASK_UPDATE: _update_task,
    Action.TASK_DELETE: _admin_or_pm,
    Action.TASK_LOG_TIME: _admin_pm_or_self,
    Action.COMMENT_CREATE: _anyone,
    Action.COMMENT_UPDATE: _update_comment,
    Action.COMMENT_DELETE: _admin_pm_or_self,
    Action.USER_CREATE: _create_user,
    Action.USER_UPDATE: _update_user,
    Action.USER_DELETE: _admin,
    Action.VIEW_USER_PERFORMANCE: _admin_pm_or_self,
    Action.VIEW_TEAM_PERFORMANCE: _admin_or_pm,
    Action.VIEW_RECOMMENDATIONS: _admin_or_pm,
}

_missing = set(Action) - set(_RULES)
if _missing:
    raise RuntimeError(f"Authorization rules missing for: {sorted(a.value for a in _missing)}")


# Denial messages surfaced to the client.
DENIAL_MESSAGES: dict[Action, str] = {
    Action.PROJECT_CREATE: "Not authorized to create projects",
    Action.PROJECT_UPDATE: "Not authorized to update projects",
    Action.PROJECT_DELETE: "Not authorized to delete projects",
    Action.TASK_CREATE: "Not authorized to create tasks",
    Action.TASK_UPDATE: "Not authorized to update this task",
    Action.TASK_DELETE: "Not authorized to delete tasks",
    Action.TASK_LOG_TIME: "Not authorized to log time for this task",
    Action.COMMENT_CREATE: "Not authorized to comment",
    Action.COMMENT_UPDATE: "Not authorized to update this comment",
    Action.COMMENT_DELETE: "Not authorized to delete this comment",
    Action.USER_CREATE: "Not authorized to create users with this role",
    Action.USER_UPDATE: "Not authorized to update this user",
    Action.USER_DELETE: "Not authorized to delete users",
    Action.VIEW_USER_PERFORMANCE: "Not authorized to view this user's performance",
    Action.VIEW_TEAM_PERFORMANCE: "Not authorized to view team analytics",
    Action.VIEW_RECOMMENDATIONS: "Not authorized to access AI recommendations",
}


# ═════════════════════════════════════════════════════════════════════════════
# Public API
# ═════════════════════════════════════════════════════════════════════════════

def is_allowed(caller, action: Action, target: Target = NO_TARGET) -> bool:
    """Evaluate the rule for ``action``. Unknown actions and callers are denied."""
    if caller is None or getattr(caller, "role", None) is None:
        return False
    rule = _RULES.get(action)
    if rule is None:
        return False
    return rule(caller, target)


def enforce(caller, action: Action, target: Target = NO_TARGET) -> None:
    """Raise AuthorizationError unless ``caller`` may perform ``action``."""
    if is_allowed(caller, action, target):
        return
    logger.warning(
        "Denied %s for user %s (role=%s) owner=%s fields=%s",
        action.value,
        getattr(caller, "id", None),
        getattr(getattr(caller, "role", None), "value", None),
        target.owner_id,
        sorted(target.fields),
        extra={"event_type": "authz_denied", "user_id": getattr(caller, "id", None)},
    )
    raise AuthorizationError(DENIAL_MESSAGES[action])
