# middleware.py
"""
Page-route gating by session validity.

API routes are left alone (they answer 401 themselves); this only decides
whether a page request is let through or redirected.
"""
import re
from urllib.parse import quote

from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from routers.auth import COOKIE_NAME, decode_session

# Routes that require authentication
PROTECTED_ROUTES = ("/problems/new", "/settings", "/admin")

# Routes that bounce an already-authenticated user to their profile
AUTH_ROUTES = ("/login", "/register")
LANDING_PAGE = "/"

# api, static assets, favicon, anything that looks like a file
_SKIP = re.compile(r"^/(api|_next/static|_next/image|static|public)(/|$)|^/favicon\.ico$|\.[^/]+$")


def _home_for(payload: dict) -> str:
    username = payload.get("username")
    if username:
        return f"/profile/{quote(str(username))}"
    return "/problems"


class SessionGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if _SKIP.search(path):
            return await call_next(request)

        payload = decode_session(request.cookies.get(COOKIE_NAME))

        if any(path.startswith(route) for route in PROTECTED_ROUTES) and not payload:
            return RedirectResponse(url=f"/login?redirect={quote(path)}")

        if payload and (path == LANDING_PAGE or any(path.startswith(route) for route in AUTH_ROUTES)):
            return RedirectResponse(url=_home_for(payload))

        return await call_next(request)
