# client/cache.py
import time
from typing import Any, Callable, Optional


class ResourceCache:
    """One cached value with a staleness window. The clock is injectable so staleness is testable."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self.value: Any = None
        self.fetched_at: Optional[float] = None

    def is_stale(self) -> bool:
        if self.fetched_at is None:
            return True
        return self.clock() - self.fetched_at > self.ttl

    def set(self, value: Any) -> None:
        self.value = value
        self.fetched_at = self.clock()

    def invalidate(self) -> None:
        """Force the next read to refetch; keeps the value around for display."""
        self.fetched_at = None

    def clear(self) -> None:
        self.value = None
        self.fetched_at = None
