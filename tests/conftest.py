"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import os
import tempfile

# ---------------------------------------------------------------------------
# Ensure a valid JWT_SECRET is always set for test runs.
# This must happen before any import of pokeroster.api.deps which validates
# the secret at module-load time.  Uploads go to a throwaway directory.
# ---------------------------------------------------------------------------
_TEST_JWT_SECRET = "test-secret-for-pytest-only-" + "x" * 40  # > 32 chars
os.environ.setdefault("JWT_SECRET", _TEST_JWT_SECRET)
os.environ.setdefault("POKEROSTER_UPLOAD_DIR", tempfile.mkdtemp(prefix="pokeroster-uploads-"))

import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from pokeroster.config import RosterConfig  # noqa: E402
from pokeroster.database.models import Base, Role, User  # noqa: E402
from pokeroster.services.access_policy import Actor  # noqa: E402
from pokeroster.services.auth_service import hash_password  # noqa: E402


@pytest.fixture
def db_engine() -> Engine:
    """Create an in-memory SQLite engine with all roster tables.

    Uses StaticPool so all threads share the same in-memory database
    (required by ``asyncio.to_thread`` used by async routes).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine):
    """Provide a session for assertions against the test database."""
    with Session(db_engine) as session:
        yield session
        session.rollback()


@pytest.fixture
def cfg() -> RosterConfig:
    return RosterConfig(app_name="Test Roster", master_username="master")


def make_user(
    engine: Engine,
    username: str,
    role: Role = Role.TRAINER,
    password: str = "pikapika",
    image_url: str | None = None,
) -> User:
    """Insert an account directly and return it (detached)."""
    with Session(engine, expire_on_commit=False) as session:
        user = User(
            username=username,
            password=hash_password(password),
            role=role.value,
            image_url=image_url,
        )
        session.add(user)
        session.commit()
        return user


def actor_for(user: User) -> Actor:
    return Actor(account_id=user.id, role=Role(user.role), username=user.username)


@pytest.fixture
def master(db_engine) -> User:
    return make_user(db_engine, "master", Role.MASTER)


@pytest.fixture
def ash(db_engine) -> User:
    return make_user(db_engine, "Ash")


@pytest.fixture
def misty(db_engine) -> User:
    return make_user(db_engine, "Misty")


@pytest.fixture
def master_actor(master) -> Actor:
    return actor_for(master)


@pytest.fixture
def ash_actor(ash) -> Actor:
    return actor_for(ash)


@pytest.fixture
def misty_actor(misty) -> Actor:
    return actor_for(misty)


def make_token(user_id: int, role: Role, username: str = "FixtureUser") -> str:
    """Create a bearer JWT.  Usable from any test module."""
    import jwt

    from pokeroster.api.deps import JWT_ALGORITHM, JWT_SECRET

    return jwt.encode(
        {"sub": str(user_id), "username": username, "role": role.value},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_engine, cfg):
    """FastAPI TestClient bound to the in-memory engine and test config."""
    from fastapi.testclient import TestClient

    from pokeroster.api.deps import get_config, get_engine
    from pokeroster.api.main import app

    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_config] = lambda: cfg
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
