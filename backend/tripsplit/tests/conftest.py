"""
Shared fixtures: an in-memory database and an authenticated API client.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from tripsplit.db.base import Base
from tripsplit.db.session import get_db
from tripsplit.main import app
import tripsplit.models  # noqa: F401


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Sign up and log in a user; returns (user_id, auth headers)."""
    def _register(name: str):
        email = f"{name.lower()}@example.com"
        response = client.post(
            "/api/auth/signup",
            json={"email": email, "full_name": name, "password": "secret123"}
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["id"]

        response = client.post("/api/auth/login", json={"email": email, "password": "secret123"})
        assert response.status_code == 200, response.text
        token = response.json()["access_token"]
        return user_id, {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture
def make_trip(client):
    """Create a trip owned by `owner` and have every user in `others` join it."""
    def _make_trip(owner, others=(), currency_code="USD", name="Road trip"):
        response = client.post(
            "/api/trips",
            json={"name": name, "currency_code": currency_code},
            headers=owner[1]
        )
        assert response.status_code == 201, response.text
        body = response.json()
        token = body["invite_url"].rsplit("/", 1)[-1]
        for _, headers in others:
            joined = client.post(f"/api/trips/join/{token}", headers=headers)
            assert joined.status_code == 200, joined.text
        return body["trip"]["id"], token

    return _make_trip
