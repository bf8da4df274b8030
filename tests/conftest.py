"""Pytest fixtures: file-backed SQLite database per test, isolated and thread-safe."""
from datetime import datetime, timedelta, timezone
import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventhub.database import Base, build_engine, get_db
from eventhub.main import app

# Import all models so they register with Base.metadata
from eventhub.models.user import User                     # noqa: F401
from eventhub.models.event import Event                   # noqa: F401
from eventhub.models.participant import EventParticipant  # noqa: F401


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test.

    A real file (not :memory:) so that worker threads in the concurrency
    tests get their own connections to the same database.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: drive the API the way a real client would
# ---------------------------------------------------------------------------
def future_date(days: int = 7) -> str:
    return (datetime.now(timezone.utc).date() + timedelta(days=days)).isoformat()


def auth_headers(user: dict) -> dict:
    return {"Authorization": f"Bearer {user['token']}"}


def create_test_user(client: TestClient, name: str = "Test User", role: str = "attendee",
                     email: str = None, password: str = "password123") -> dict:
    """Helper: POST /api/auth/register and return {"user": ..., "token": ...}."""
    email = email or f"{name.lower().replace(' ', '.')}@example.com"
    resp = client.post("/api/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def create_test_event(client: TestClient, organizer: dict, **overrides) -> dict:
    """Helper: POST /api/events as ``organizer`` and return the event JSON."""
    payload = {
        "title": "Tech Conference",
        "description": "Annual technology conference featuring latest innovations",
        "date": future_date(),
        "time": "09:00",
        "location": "Convention Center",
    }
    payload.update(overrides)
    resp = client.post("/api/events", json=payload, headers=auth_headers(organizer))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["event"]
