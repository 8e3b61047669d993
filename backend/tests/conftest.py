"""Pytest fixtures: a fresh SQLite database per test for fast, isolated tests."""
import os
from datetime import datetime, timezone
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from visitdesk.database import Base, get_db
from visitdesk.main import app
from visitdesk.models.user import Role, User
from visitdesk.schemas.actor import Actor
from visitdesk.services import visitor_service

# Import all models so they register with Base.metadata
import visitdesk.models  # noqa: F401


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
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
def actors(db):
    """Seed one user per role; returns their Actor descriptors (ids 1, 2, 3)."""
    seeded = [
        User(id=1, name="Rina Receptionist", email="rina@example.com", role=Role.receptionist),
        User(id=2, name="Adi Admin", email="adi@example.com", role=Role.admin),
        User(id=3, name="Maya Manager", email="maya@example.com", role=Role.manager),
    ]
    db.add_all(seeded)
    db.commit()
    return SimpleNamespace(
        receptionist=Actor(id=1, role="Receptionist", display_name="Rina Receptionist"),
        admin=Actor(id=2, role="Admin", display_name="Adi Admin"),
        manager=Actor(id=3, role="Manager", display_name="Maya Manager"),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def make_visitor(db, actor: Actor, check_in_time: datetime = None, **fields):
    """Helper: check a visitor in through the service layer and return it."""
    data = {"full_name": "Budi Santoso", "institution": "Universitas Pendidikan", "purpose": "Consultation",
            "location": "Main Hall"}
    data.update(fields)
    return visitor_service.check_in_visitor(
        db, data, actor, check_in_time=check_in_time or datetime.now(timezone.utc),
    )


def auth_headers(actor: Actor) -> dict:
    """Helper: gateway headers identifying ``actor``."""
    headers = {"X-User-Id": str(actor.id), "X-User-Role": actor.role}
    if actor.display_name:
        headers["X-User-Name"] = actor.display_name
    return headers


def check_in_via_api(client: TestClient, actor: Actor, name: str = "Budi Santoso", **fields) -> dict:
    """Helper: POST /api/visitors and return response JSON."""
    resp = client.post("/api/visitors/", json={"full_name": name, **fields}, headers=auth_headers(actor))
    assert resp.status_code == 201, resp.text
    return resp.json()
