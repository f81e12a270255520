"""
Shared pytest fixtures for the SmartSprint test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - admin / pm / dev / other_dev / tester: one User per role
    - auth_headers: callable building Bearer headers for a user
    - project / task: pre-created Project and Task (task assigned to ``dev``)
"""

import pytest

from smartsprint import create_app
from smartsprint.models import db as _db
from smartsprint.models.auth import User
from smartsprint.models.enums import Level, Role, Team
from smartsprint.models.project import Project, Task
from smartsprint.services.jwt_service import generate_access_token
from smartsprint.utils.crypto import hash_password

PASSWORD = "Secret123!"


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Users ────────────────────────────────────────────────────────────────


def make_user(name, email, role, team=Team.NONE, level=Level.NONE, password=PASSWORD):
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password, rounds=4),
        role=role,
        team=team,
        level=level,
    )
    _db.session.add(user)
    _db.session.commit()
    return user


@pytest.fixture()
def admin():
    return make_user("Ada Admin", "admin@smartsprint.com", Role.ADMIN)


@pytest.fixture()
def pm():
    return make_user("Pat Manager", "pm@smartsprint.com", Role.PROJECT_MANAGER)


@pytest.fixture()
def dev():
    return make_user(
        "Dana Dev", "dev@smartsprint.com", Role.DEVELOPER, team=Team.BACKEND, level=Level.SENIOR,
    )


@pytest.fixture()
def other_dev():
    return make_user(
        "Omar Other", "other@smartsprint.com", Role.DEVELOPER, team=Team.BACKEND, level=Level.JUNIOR,
    )


@pytest.fixture()
def tester():
    return make_user(
        "Tia Tester", "tester@smartsprint.com", Role.TESTER, team=Team.TESTER_SECURITY,
    )


@pytest.fixture()
def auth_headers():
    """Return a function building JSON + Bearer headers for a user."""
    def _headers(user):
        return {
            "Authorization": f"Bearer {generate_access_token(user)}",
            "Content-Type": "application/json",
        }
    return _headers


# ── Domain objects ───────────────────────────────────────────────────────


@pytest.fixture()
def project():
    p = Project(name="Apollo", description="Moonshot")
    _db.session.add(p)
    _db.session.commit()
    return p


@pytest.fixture()
def task(project, dev):
    t = Task(project=project, title="Build login", description="JWT flow", assigned_to=dev.id)
    _db.session.add(t)
    _db.session.commit()
    return t
