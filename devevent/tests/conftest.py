import os
import tempfile

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["API_AUTH_TOKEN"] = "test-token"
os.environ["STATIC_DIR"] = tempfile.mkdtemp(prefix="devevent-static-")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from devevent.database.db import Base, connection_manager
from devevent.main import app
from devevent.schemas.events import EventCreate
from devevent.services import cache
from devevent.services.images import LocalImageHost, get_image_host


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test."""
    engine = connection_manager.connect()
    connection_manager.init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    db: Session = connection_manager.session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def redis_client(monkeypatch: pytest.MonkeyPatch, fake_redis):
    """Route every cache call to the in-process fake."""
    monkeypatch.setattr(cache, "get_redis_client", lambda: fake_redis)
    return fake_redis


@pytest.fixture
def image_dir(tmp_path):
    return tmp_path / "events"


@pytest.fixture
def client(image_dir):
    app.dependency_overrides[get_image_host] = lambda: LocalImageHost(
        image_dir, "http://testserver/static/events"
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": "Bearer test-token"}


@pytest.fixture
def event_data() -> dict:
    return {
        "title": "PyCon Meetup 2025",
        "description": "An evening of Python talks.",
        "overview": "Lightning talks and networking.",
        "image": "https://images.example.com/pycon.png",
        "venue": "Tech Hub",
        "location": "Oslo, Norway",
        "date": "2025-11-07",
        "time": "18:30",
        "mode": "offline",
        "audience": "Developers",
        "agenda": ["Doors open", "Talks", "Networking"],
        "organizer": "Oslo Python Group",
        "tags": ["python", "meetup"],
    }


@pytest.fixture
def make_event_record(event_data):
    def _make(**overrides) -> EventCreate:
        return EventCreate(**{**event_data, **overrides})

    return _make


@pytest.fixture
def unreachable_session(tmp_path):
    """Session bound to a SQLite file whose directory does not exist."""
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'devevent.db'}")
    db = Session(engine)
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
