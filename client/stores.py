# client/stores.py
"""
Client-side caches for problems and solutions.

A store answers from its cache while the cache is fresh, and goes to the
API otherwise. Failed fetches leave the previous data in place and record
the error on the store so a caller can show both.
"""
import logging
import time
from typing import Callable, Dict, List, Optional

import requests

from client.api import ApiError, ForumClient
from client.cache import ResourceCache

logger = logging.getLogger("crowdsolve.client")

PROBLEMS_TTL = 5 * 60     # seconds
SOLUTIONS_TTL = 3 * 60    # seconds

DEFAULT_FILTERS = {"page": 1, "limit": 10}

UNKNOWN_AUTHOR = {"id": None, "username": "Unknown", "avatar": None, "reputation": 0}

FETCH_ERRORS = (ApiError, requests.RequestException)


def normalize_problem(problem: dict) -> dict:
    return {
        **problem,
        "tags": problem.get("tags") if isinstance(problem.get("tags"), list) else [],
        "images": problem.get("images") if isinstance(problem.get("images"), list) else [],
        "author": problem.get("author") or dict(UNKNOWN_AUTHOR),
        "status": problem.get("status") or "open",
        "views": problem.get("views") or 0,
    }


def normalize_solution(solution: dict) -> dict:
    return {
        **solution,
        "images": solution.get("images") if isinstance(solution.get("images"), list) else [],
        "author": solution.get("author") or dict(UNKNOWN_AUTHOR),
        "upvotes": solution.get("upvotes") or 0,
        "downvotes": solution.get("downvotes") or 0,
        "is_accepted": bool(solution.get("is_accepted")),
    }


class ProblemsStore:
    def __init__(self, api: ForumClient, ttl: float = PROBLEMS_TTL,
                 clock: Callable[[], float] = time.monotonic):
        self.api = api
        self.cache = ResourceCache(ttl, clock)
        self.filters: dict = dict(DEFAULT_FILTERS)
        self.pagination: Optional[dict] = None
        self.current_problem: Optional[dict] = None
        self.error: Optional[str] = None

    @property
    def problems(self) -> List[dict]:
        return self.cache.value or []

    def fetch_problems(self, filters: Optional[dict] = None, force_refresh: bool = False) -> List[dict]:
        """Return the problem list, refetching when stale, forced, or the filters changed."""
        wanted = {**self.filters, **(filters or {})}
        if not force_refresh and not self.cache.is_stale() and self.problems and wanted == self.filters:
            return self.problems

        try:
            data = self.api.list_problems(**wanted)
        except FETCH_ERRORS as e:
            self.error = str(e) or "Failed to fetch problems"
            logger.warning("Fetch problems error: %s", self.error)
            return self.problems

        self.cache.set([normalize_problem(p) for p in data.get("problems", [])])
        self.pagination = data.get("pagination")
        self.filters = wanted
        self.error = None
        return self.problems

    def fetch_problem(self, problem_id: int) -> Optional[dict]:
        try:
            problem = self.api.get_problem(problem_id)
        except FETCH_ERRORS as e:
            self.error = str(e) or "Failed to fetch problem"
            logger.warning("Fetch problem error: %s", self.error)
            return self.current_problem

        self.current_problem = normalize_problem(problem)
        self.error = None
        return self.current_problem

    def refresh(self) -> List[dict]:
        return self.fetch_problems(self.filters, force_refresh=True)

    def add_problem(self, problem: dict) -> None:
        self.cache.value = [normalize_problem(problem)] + self.problems

    def update_problem(self, problem_id: int, updates: dict) -> None:
        self.cache.value = [
            {**p, **updates} if p.get("id") == problem_id else p for p in self.problems
        ]
        if self.current_problem and self.current_problem.get("id") == problem_id:
            self.current_problem = {**self.current_problem, **updates}

    def remove_problem(self, problem_id: int) -> None:
        self.cache.value = [p for p in self.problems if p.get("id") != problem_id]
        if self.current_problem and self.current_problem.get("id") == problem_id:
            self.current_problem = None

    def clear(self) -> None:
        self.cache.clear()
        self.current_problem = None
        self.error = None


class SolutionsStore:
    def __init__(self, api: ForumClient, ttl: float = SOLUTIONS_TTL,
                 clock: Callable[[], float] = time.monotonic):
        self.api = api
        self.ttl = ttl
        self.clock = clock
        self.caches: Dict[int, ResourceCache] = {}
        self.user_votes: Dict[int, str] = {}
        self.error: Optional[str] = None

    def _cache(self, problem_id: int) -> ResourceCache:
        if problem_id not in self.caches:
            self.caches[problem_id] = ResourceCache(self.ttl, self.clock)
        return self.caches[problem_id]

    def solutions_for(self, problem_id: int) -> List[dict]:
        return self._cache(problem_id).value or []

    def fetch_solutions(self, problem_id: int, force_refresh: bool = False) -> List[dict]:
        cache = self._cache(problem_id)
        if not force_refresh and not cache.is_stale():
            return cache.value or []

        try:
            solutions = self.api.list_solutions(problem_id)
        except FETCH_ERRORS as e:
            self.error = str(e) or "Failed to fetch solutions"
            logger.warning("Fetch solutions error: %s", self.error)
            return cache.value or []

        cache.set([normalize_solution(s) for s in solutions])
        self.error = None
        return cache.value

    def add_solution(self, problem_id: int, solution: dict) -> None:
        cache = self._cache(problem_id)
        cache.value = (cache.value or []) + [normalize_solution(solution)]

    def _patch(self, solution_id: int, fn: Callable[[dict], dict]) -> None:
        for cache in self.caches.values():
            if cache.value:
                cache.value = [fn(s) if s.get("id") == solution_id else s for s in cache.value]

    def vote(self, solution_id: int, vote_type: str) -> dict:
        """Send the vote and mirror the server's counters into every cached copy of the solution."""
        result = self.api.vote(solution_id, vote_type)
        counters = {"upvotes": result["upvotes"], "downvotes": result["downvotes"]}
        self._patch(solution_id, lambda s: {**s, **counters})

        if result.get("message") == "Vote removed":
            self.user_votes.pop(solution_id, None)
        else:
            self.user_votes[solution_id] = vote_type
        return result

    def accept(self, problem_id: int, solution_id: int) -> None:
        self.api.accept(solution_id)
        cache = self._cache(problem_id)
        if cache.value:
            cache.value = [{**s, "is_accepted": s.get("id") == solution_id} for s in cache.value]

    def clear(self, problem_id: Optional[int] = None) -> None:
        if problem_id is None:
            self.caches.clear()
            self.user_votes.clear()
        else:
            self.caches.pop(problem_id, None)
        self.error = None
