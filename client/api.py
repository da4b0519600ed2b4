# client/api.py
import logging
from typing import Optional

import requests

logger = logging.getLogger("crowdsolve.client")

DEFAULT_TIMEOUT = 10  # seconds


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class ForumClient:
    """Thin wrapper over the CrowdSolve JSON API. The session cookie lives in the requests.Session jar."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = self.session.request(
            method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
        )
        if not response.ok:
            try:
                message = response.json().get("error") or response.reason
            except ValueError:
                message = response.text or response.reason
            logger.warning("%s %s failed: %s %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message)
        return response.json()

    # ---------- auth ----------

    def register(self, username: str, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/register",
                             json={"username": username, "email": email, "password": password})
        return data["user"]

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        return data["user"]

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")

    def me(self) -> dict:
        return self._request("GET", "/api/auth/me")["user"]

    # ---------- problems ----------

    def list_problems(self, **filters) -> dict:
        params = {k: v for k, v in filters.items() if v not in (None, "")}
        return self._request("GET", "/api/problems", params=params)

    def get_problem(self, problem_id: int) -> dict:
        return self._request("GET", f"/api/problems/{problem_id}")["problem"]

    def create_problem(self, **fields) -> dict:
        return self._request("POST", "/api/problems", json=fields)["problem"]

    # ---------- solutions ----------

    def list_solutions(self, problem_id: int) -> list:
        return self._request("GET", f"/api/problems/{problem_id}/solutions")["solutions"]

    def get_solution(self, solution_id: int) -> dict:
        return self._request("GET", f"/api/solutions/{solution_id}")["solution"]

    def create_solution(self, problem_id: int, content: str, images=None) -> dict:
        body = {"content": content, "images": images or []}
        return self._request("POST", f"/api/problems/{problem_id}/solutions", json=body)["solution"]

    def vote(self, solution_id: int, vote_type: str) -> dict:
        return self._request("POST", f"/api/solutions/{solution_id}/vote", json={"vote_type": vote_type})

    def get_vote(self, solution_id: int) -> Optional[str]:
        return self._request("GET", f"/api/solutions/{solution_id}/vote")["user_vote"]

    def accept(self, solution_id: int) -> None:
        self._request("POST", f"/api/solutions/{solution_id}/accept")
