import pytest


@pytest.mark.parametrize("path", ["/problems/new", "/settings", "/admin", "/admin/users"])
def test_protected_pages_redirect_to_login(anon, path):
    resp = anon.get(path, follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == f"/login?redirect={path}"


@pytest.mark.parametrize("path", ["/login", "/register", "/"])
def test_auth_pages_redirect_signed_in_users(alice, path):
    resp = alice.get(path, follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/profile/alice"


def test_signed_out_visitor_passes_through(anon):
    resp = anon.get("/", follow_redirects=False)
    assert resp.status_code == 200
    assert resp.json()["name"] == "CrowdSolve API"


@pytest.mark.parametrize("path", ["/api/auth/me", "/static/app.css", "/favicon.ico", "/logo.png"])
def test_skipped_paths_are_not_gated(alice, path):
    resp = alice.get(path, follow_redirects=False)
    assert resp.status_code != 307


def test_invalid_cookie_counts_as_signed_out(anon):
    resp = anon.get("/settings", headers={"Cookie": "token=garbage"}, follow_redirects=False)
    assert resp.status_code == 307
    assert resp.headers["location"] == "/login?redirect=/settings"


def test_health(anon):
    assert anon.get("/health").json()["status"] == "healthy"
