from datetime import timedelta

import jwt

from conftest import PASSWORD
from routers.auth import COOKIE_NAME, create_session_token, decode_session


def test_register_sets_session_cookie(make_client):
    client = make_client()
    resp = client.post("/api/auth/register", json={
        "username": "dana",
        "email": "Dana@Example.com",
        "password": PASSWORD,
    })
    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["username"] == "dana"
    assert user["email"] == "dana@example.com"
    assert user["reputation"] == 0
    assert "hashed_password" not in user
    assert COOKIE_NAME in resp.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user["id"]


def test_register_rejects_duplicates(alice, anon):
    for body in (
        {"username": "alice", "email": "other@example.com", "password": PASSWORD},
        {"username": "someone", "email": "alice@example.com", "password": PASSWORD},
    ):
        resp = anon.post("/api/auth/register", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "User with this email or username already exists"}


def test_register_validation_messages(anon):
    resp = anon.post("/api/auth/register", json={
        "username": "ab", "email": "ab@example.com", "password": PASSWORD,
    })
    assert resp.status_code == 400
    assert resp.json()["error"] == "Username must be between 3 and 30 characters"

    resp = anon.post("/api/auth/register", json={
        "username": "abcd", "email": "ab@example.com", "password": "123",
    })
    assert resp.status_code == 400
    assert resp.json()["error"] == "Password must be at least 6 characters"


def test_login_and_logout(alice, make_client):
    client = make_client()
    bad = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-one"})
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid credentials"}

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert unknown.status_code == 401
    assert unknown.json() == {"error": "Invalid credentials"}

    ok = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": PASSWORD})
    assert ok.status_code == 200
    assert ok.json()["user"]["username"] == "alice"
    assert client.get("/api/auth/me").status_code == 200

    out = client.post("/api/auth/logout")
    assert out.json() == {"message": "Logged out successfully"}
    assert client.get("/api/auth/me").status_code == 401


def test_me_requires_session(anon):
    resp = anon.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Not authenticated"}


def test_session_token_claims(db):
    from crud.users import register_user

    user = register_user(db, "erin", "erin@example.com", PASSWORD)
    payload = decode_session(create_session_token(user))
    assert payload["id"] == user.id
    assert payload["username"] == "erin"
    assert payload["email"] == "erin@example.com"


def test_expired_or_tampered_tokens_are_no_session(db):
    from crud.users import register_user

    user = register_user(db, "fred", "fred@example.com", PASSWORD)
    expired = create_session_token(user, expires_delta=timedelta(seconds=-10))
    assert decode_session(expired) is None

    forged = jwt.encode({"id": user.id, "username": "fred"}, "not-the-key", algorithm="HS256")
    assert decode_session(forged) is None
    assert decode_session(None) is None
    assert decode_session("") is None


def test_auth_bodies_reject_unknown_fields(alice, anon):
    resp = anon.post("/api/auth/register", json={
        "username": "gina", "email": "gina@example.com", "password": PASSWORD, "reputation": 100,
    })
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid input"}
    assert anon.get("/api/users/gina").status_code == 404

    resp = anon.post("/api/auth/login", json={
        "email": "alice@example.com", "password": PASSWORD, "remember": True,
    })
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid input"}
