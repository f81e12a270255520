"""
User Service - CRUD, login, self-registration and password change.

Every mutating function takes the acting user first and runs the
authorization policy after the target has been looked up and before
anything is written.
"""

import logging

from email_validator import EmailNotValidError, validate_email
from flask import current_app

from smartsprint.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from smartsprint.core.policy import Action, Target, enforce
from smartsprint.models import db
from smartsprint.models.auth import User
from smartsprint.models.enums import Level, Role, Team
from smartsprint.utils.crypto import hash_password, verify_password
from smartsprint.utils.helpers import commit_or_raise, get_or_404, parse_enum

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = frozenset({Role.DEVELOPER, Role.TESTER})

# bcrypt only hashes the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


# ═══════════════════════════════════════════════════════════════
# Validation helpers
# ═══════════════════════════════════════════════════════════════
def _normalize_email(email) -> str:
    if not isinstance(email, str) or not email.strip():
        raise ValidationError("Email is required", details={"email": "required"})
    try:
        return validate_email(email.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email: {e}", details={"email": "invalid"}) from None


def _require_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Name is required", details={"name": "required"})
    return name.strip()


def _check_password(password, field="password") -> str:
    min_len = current_app.config["MIN_PASSWORD_LENGTH"]
    if not isinstance(password, str) or len(password) < min_len:
        raise ValidationError(
            f"Password must be at least {min_len} characters",
            details={field: f"min length {min_len}"},
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            details={field: f"max {MAX_PASSWORD_BYTES} bytes"},
        )
    return password


def _ensure_email_free(email: str, exclude_user_id: int | None = None) -> None:
    q = User.query.filter(db.func.lower(User.email) == email.lower())
    if exclude_user_id is not None:
        q = q.filter(User.id != exclude_user_id)
    if q.first() is not None:
        raise ValidationError("Email already in use", details={"email": "duplicate"})


def _hash(password: str) -> str:
    return hash_password(password, rounds=current_app.config["BCRYPT_ROUNDS"])


def _build_user(data: dict, role: Role) -> User:
    name = _require_name(data.get("name"))
    email = _normalize_email(data.get("email"))
    password = _check_password(data.get("password"))
    team = parse_enum(Team, data.get("team") or Team.NONE, "team")
    level = parse_enum(Level, data.get("level") or Level.NONE, "level")
    _ensure_email_free(email)
    return User(
        name=name,
        email=email,
        password_hash=_hash(password),
        role=role,
        team=team,
        level=level,
    )


# ═══════════════════════════════════════════════════════════════
# Queries
# ═══════════════════════════════════════════════════════════════
def list_users() -> list[User]:
    return User.query.order_by(User.id).all()


def get_user(user_id: int) -> User:
    return get_or_404(User, user_id, "User")


def list_users_by_role(role_value: str) -> list[User]:
    role = parse_enum(Role, role_value, "role")
    return User.query.filter_by(role=role).order_by(User.id).all()


def list_users_by_team(team_value: str) -> list[User]:
    team = parse_enum(Team, team_value, "team")
    return User.query.filter_by(team=team).order_by(User.id).all()


# ═══════════════════════════════════════════════════════════════
# Mutations
# ═══════════════════════════════════════════════════════════════
def create_user(actor, data: dict) -> User:
    """Create a user on behalf of ``actor`` (Admin, or PM for non-privileged roles)."""
    requested_role = parse_enum(Role, data.get("role") or Role.DEVELOPER, "role")
    enforce(actor, Action.USER_CREATE, Target(requested_role=requested_role))

    user = _build_user(data, requested_role)
    db.session.add(user)
    commit_or_raise()
    logger.info("User %s created user %s (%s)", actor.id, user.id, user.role.value)
    return user


def update_user(actor, user_id: int, data: dict) -> User:
    """Update name/email/role/team/level. Passwords change via change_password."""
    user = get_user(user_id)

    requested_role = None
    if data.get("role") is not None:
        requested_role = parse_enum(Role, data["role"], "role")
    enforce(
        actor,
        Action.USER_UPDATE,
        Target(owner_id=user.id, role=user.role, requested_role=requested_role),
    )

    changes = {}
    if "name" in data:
        changes["name"] = _require_name(data["name"])
    if "email" in data:
        email = _normalize_email(data["email"])
        _ensure_email_free(email, exclude_user_id=user.id)
        changes["email"] = email
    if requested_role is not None:
        changes["role"] = requested_role
    if data.get("team") is not None:
        changes["team"] = parse_enum(Team, data["team"], "team")
    if data.get("level") is not None:
        changes["level"] = parse_enum(Level, data["level"], "level")

    for key, val in changes.items():
        setattr(user, key, val)
    commit_or_raise()
    return user


def delete_user(actor, user_id: int) -> None:
    user = get_user(user_id)
    enforce(actor, Action.USER_DELETE, Target(owner_id=user.id, role=user.role))
    actor_id = actor.id
    db.session.delete(user)
    commit_or_raise()
    logger.info("User %s deleted user %s", actor_id, user_id)


# ═══════════════════════════════════════════════════════════════
# Authentication flows
# ═══════════════════════════════════════════════════════════════
def authenticate_user(email, password) -> User:
    """Return the user for valid credentials, else AuthenticationError.

    Unknown email and wrong password produce the same message.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password must be strings")
    user = User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email, extra={"event_type": "login_failed"})
        raise AuthenticationError("Invalid credentials")
    return user


def register_user(data: dict) -> User:
    """Public self-registration. Only non-privileged roles may be chosen."""
    role = parse_enum(Role, data.get("role") or Role.DEVELOPER, "role")
    if role not in SELF_REGISTER_ROLES:
        raise AuthorizationError("Not authorized to register with this role")

    user = _build_user(data, role)
    db.session.add(user)
    commit_or_raise()
    logger.info("User %s registered (%s)", user.id, user.role.value)
    return user


def change_password(user: User, current_password, new_password) -> None:
    if not current_password or not new_password:
        raise ValidationError("Current and new password are required")
    if not isinstance(current_password, str) or not isinstance(new_password, str):
        raise ValidationError("Passwords must be strings")
    if not verify_password(current_password, user.password_hash):
        raise AuthenticationError("Current password is incorrect")
    user.password_hash = _hash(_check_password(new_password, "new_password"))
    commit_or_raise()
