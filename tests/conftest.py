import itertools
import os
from datetime import timedelta

# must be set before anything under zawaj reads its config
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["LOG_LEVEL"] = "INFO"
os.environ["CHAT_SYNC_BACKEND"] = "log"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from zawaj.core.clock import today, years_before
from zawaj.core.db import Base, get_db, make_engine, make_session_factory
from zawaj.main import app
from zawaj.models.user import User
from zawaj.services.chat_sync import get_chat_transport
from zawaj.services.profile_store import ProfileStore

engine = make_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = make_session_factory(engine)


class RecordingTransport:
    def __init__(self):
        self.created = []
        self.deleted = []

    def on_match_created(self, event):
        self.created.append(event)

    def on_match_deleted(self, event):
        self.deleted.append(event)


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store():
    db = TestingSessionLocal()
    try:
        yield ProfileStore(db)
    finally:
        db.close()


@pytest.fixture
def chat():
    return RecordingTransport()


@pytest.fixture
def client(chat):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_chat_transport] = lambda: chat
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(store):
    counter = itertools.count(1)

    def _make(role="male", mother_for=None, age=28, **fields):
        n = next(counter)
        fields.setdefault("display_name", f"{role} {n}")
        fields.setdefault("dob", years_before(today(), age) - timedelta(days=30))
        fields.setdefault("muslim_affirmed", True)
        user = User(role=role, mother_for=mother_for, **fields)
        store.add_user(user)
        store.commit()
        return user

    return _make


@pytest.fixture
def as_user():
    def _headers(user):
        return {"X-User-Id": user.id}

    return _headers
