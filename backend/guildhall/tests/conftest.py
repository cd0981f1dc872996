"""
Pytest fixtures shared across all test modules.
Uses an in-memory SQLite database with StaticPool so all connections
share a single in-memory DB, so no real database is required for tests.
"""

import os

# Set env vars BEFORE any guildhall module is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-min-32-chars-long!!"
os.environ["ALGORITHM"] = "HS256"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import guildhall modules AFTER env vars are set
from guildhall.core.security import create_access_token  # noqa: E402
from guildhall.database import Base, get_db  # noqa: E402
from guildhall.main import app  # noqa: E402
from guildhall.store import DocumentStore  # noqa: E402

# Single shared in-memory SQLite engine. StaticPool ensures all
# connections share the same DB instance.
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db):
    return DocumentStore(db)


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def headers():
    return auth_headers()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def auth_headers(user_id="u1"):
    token = create_access_token({"sub": user_id})
    return {"Authorization": f"Bearer {token}"}


def create_server(client: TestClient, headers, name="Guild", owner_id="u1", **extra):
    resp = client.post("/servers", json={"name": name, "ownerId": owner_id, **extra}, headers=headers)
    assert resp.status_code == 201, f"Server creation failed: {resp.json()}"
    return resp.json()


def create_channel(client: TestClient, headers, server_id, name="general", user_id="u1"):
    resp = client.post(f"/servers/{server_id}/channels", json={"name": name, "userId": user_id}, headers=headers)
    assert resp.status_code == 201, f"Channel creation failed: {resp.json()}"
    return resp.json()


def post_message(client: TestClient, headers, channel_id, server_id, content="Hello!", author_id="u1"):
    resp = client.post(
        f"/channels/{channel_id}/messages",
        json={"authorId": author_id, "authorName": author_id.upper(), "content": content, "serverId": server_id},
        headers=headers,
    )
    assert resp.status_code == 201, f"Message creation failed: {resp.json()}"
    return resp.json()
