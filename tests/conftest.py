import os

# Must be set before the application modules are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smart_budget import models
from smart_budget.auth import create_access_token, hash_password
from smart_budget.database import Base
from smart_budget.dependencies import get_db, get_notifier
from smart_budget.main import app
from smart_budget.services.realtime import ConnectionManager


class RecordingNotifier:
    """Stands in for the socket registry and remembers what was published."""

    def __init__(self):
        self.events = []

    async def send_to_user(self, user_id, event, data):
        self.events.append((user_id, event, data))
        return 1

    def names(self):
        return [event for _, event, _ in self.events]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


def _override_db(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()
    return override_get_db


@pytest.fixture
def client(session_factory, notifier):
    app.dependency_overrides[get_db] = _override_db(session_factory)
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def live_client(session_factory):
    """Client wired to a fresh, real socket registry."""
    app.state.notifier = ConnectionManager()
    app.dependency_overrides[get_db] = _override_db(session_factory)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="user", last_login=None, email=None, password="secret123"):
        counter["n"] += 1
        user = models.User(
            name=f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password(password),
            role=role,
            last_login=last_login,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def headers(user):
    return auth_headers(user)


@pytest.fixture
def headers_for():
    return auth_headers
