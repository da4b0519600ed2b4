import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, get_db
from main import app

PASSWORD = "secret123"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestingSession
    app.dependency_overrides.clear()
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
def make_client(session_factory):
    """Each client keeps its own cookie jar, so each one is a separate logged-in user."""
    clients = []

    def _make(username=None):
        client = TestClient(app)
        clients.append(client)
        if username:
            resp = client.post("/api/auth/register", json={
                "username": username,
                "email": f"{username}@example.com",
                "password": PASSWORD,
            })
            assert resp.status_code == 201, resp.text
            client.user = resp.json()["user"]
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def anon(make_client):
    return make_client()


@pytest.fixture
def alice(make_client):
    return make_client("alice")


@pytest.fixture
def bob(make_client):
    return make_client("bob")


@pytest.fixture
def carol(make_client):
    return make_client("carol")


def post_problem(client, title="Pothole on Main Street", **fields):
    body = {
        "title": title,
        "description": "A deep pothole near the bus stop keeps damaging bikes.",
        "tags": ["roads"],
    }
    body.update(fields)
    resp = client.post("/api/problems", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()["problem"]


def post_solution(client, problem_id, content="Fill it with cold patch asphalt as a stopgap."):
    resp = client.post(f"/api/problems/{problem_id}/solutions", json={"content": content})
    assert resp.status_code == 201, resp.text
    return resp.json()["solution"]


def reputation_of(client, username):
    return client.get(f"/api/users/{username}").json()["user"]["reputation"]
