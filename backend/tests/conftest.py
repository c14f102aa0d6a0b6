"""Pytest fixtures — per-test SQLite database for fast, isolated tests."""
import datetime as dt
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from eventhub.database import Base, get_db
from eventhub.main import app

# Import all models so they register with Base.metadata
from eventhub.models.profile import Profile     # noqa: F401
from eventhub.models.event import Event         # noqa: F401
from eventhub.models.attendee import Attendee   # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def statements(db_engine):
    """Every SQL statement sent to the test database, in order.

    Clear it right before the call under test.
    """
    seen: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(db_engine, "before_cursor_execute", _record)
    yield seen
    event.remove(db_engine, "before_cursor_execute", _record)


def count_from(statements: list[str], table: str) -> int:
    """Number of SELECTs reading directly FROM ``table``."""
    return sum(1 for s in statements if s.lstrip().upper().startswith("SELECT") and f"FROM {table}" in s)


# ---------------------------------------------------------------------------
# Helpers: rows inserted straight through a session
# ---------------------------------------------------------------------------
def make_profile(db, name: str = "Test User", email: str = "") -> Profile:
    profile = Profile(name=name, email=email or f"{name.lower().replace(' ', '.')}@example.com")
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def make_event(db, organizer: Profile, title: str = "Test Event",
               date: dt.date = dt.date(2025, 6, 1), **overrides) -> Event:
    values = {
        "description": f"{title} description",
        "time": "10:00",
        "location": "Town Hall",
        "capacity": 10,
        "tags": [],
        "is_public": True,
    }
    values.update(overrides)
    ev = Event(title=title, date=date, organizer_id=organizer.id, **values)
    db.add(ev)
    db.commit()
    db.refresh(ev)
    return ev


def rsvp(db, ev: Event, user: Profile) -> None:
    """Insert an attendance row directly, bypassing the toggle rules."""
    db.add(Attendee(event_id=ev.id, user_id=user.id))
    db.commit()


# ---------------------------------------------------------------------------
# Helpers: resources created through the API, return the JSON response dict
# ---------------------------------------------------------------------------
def create_test_profile(client: TestClient, name: str = "Test User") -> dict:
    """Helper — POST /api/profiles and return response JSON."""
    resp = client.post("/api/profiles/", json={
        "name": name,
        "email": f"{name.lower().replace(' ', '.')}@example.com",
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def event_payload(organizer_id: str, **overrides) -> dict:
    payload = {
        "title": "Test Event",
        "description": "Something worth going to",
        "date": "2025-06-01",
        "time": "10:00",
        "location": "Town Hall",
        "organizer_id": organizer_id,
        "capacity": 10,
        "tags": ["x"],
        "is_public": True,
    }
    payload.update(overrides)
    return payload


def create_test_event(client: TestClient, organizer_id: str, **overrides) -> dict:
    """Helper — POST /api/events and return response JSON."""
    resp = client.post("/api/events/", json=event_payload(organizer_id, **overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()
