import os

# Settings are read at import time, so configure before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret"

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booktracker.core.database import Base, get_db
from booktracker.main import app
from booktracker.services.cover_service import cover_service

TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture
def engine():
    # One shared in-memory connection so every session sees the same tables
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
def cover_lookup(monkeypatch):
    """Stand-in for the Open Library lookup used by the routes"""
    lookup = MagicMock(return_value=None)
    monkeypatch.setattr(cover_service, "fetch_cover_url", lookup)
    return lookup


@pytest.fixture
def make_client(session_factory, cover_lookup):
    """Build TestClients that share the test database but keep separate cookies"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


def register(client: TestClient, email: str, password: str = TEST_PASSWORD):
    return client.post(
        "/register",
        data={"email": email, "password": password},
        follow_redirects=False,
    )


@pytest.fixture
def reader(client):
    """A client logged in as reader@example.com"""
    response = register(client, "reader@example.com")
    assert response.status_code == 303
    return client
