"""Shared lookup, parsing and commit helpers used by the service layer.

get_or_404:       primary-key lookup that raises NotFoundError
id_in_range:      whether an integer fits the INTEGER id columns
parse_enum:       request string → closed enum member, or ValidationError
commit_or_raise:  commit with rollback; IntegrityError → ValidationError
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from smartsprint.core.exceptions import NotFoundError, ValidationError
from smartsprint.models import db

logger = logging.getLogger(__name__)

# signed 32-bit, the narrowest INTEGER among supported backends
MAX_DB_INT = 2**31 - 1


def id_in_range(pk) -> bool:
    return isinstance(pk, int) and -MAX_DB_INT - 1 <= pk <= MAX_DB_INT


def get_or_404(model, pk, label=None):
    """Fetch a model instance by primary key or raise NotFoundError.

    Usage::

        task = get_or_404(Task, task_id)
    """
    label = label or model.__name__
    if not id_in_range(pk):
        raise NotFoundError(label, pk)
    obj = db.session.get(model, pk)
    if obj is None:
        raise NotFoundError(label, pk)
    return obj


def parse_enum(enum_cls, value, field):
    """Resolve ``value`` to a member of ``enum_cls``.

    Accepts a member or its string value. Anything else raises
    ValidationError naming the field and the accepted values.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        valid = ", ".join(m.value for m in enum_cls)
        raise ValidationError(
            f"Invalid {field} '{value}'",
            details={field: f"Must be one of: {valid}"},
        ) from None


def commit_or_raise():
    """Commit the current session, rolling back on failure.

    IntegrityError → ValidationError (constraint violation, HTTP 400)
    Other SQLAlchemyError → re-raised after rollback (HTTP 500)
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit: %s", exc.orig)
        raise ValidationError("Duplicate value or constraint violation") from exc
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Database error on commit")
        raise
