"""Sliding-window rate limiting."""

import threading
import time
from collections import deque
from collections.abc import Callable


class RateLimitExceededError(Exception):
    """Raised when a caller exceeds a request limit."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SlidingWindowRateLimiter:
    """Counts hits per key over a trailing time window.

    State is guarded by one lock, so a single instance can be shared across
    request handlers. Keys with no hits left in the window are dropped.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def try_acquire(self, key: str) -> bool:
        """Record a hit for key and return False if the limit is reached."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            hits = self._hits.setdefault(key, deque())
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def remaining(self, key: str) -> int:
        """Return how many hits are left for key in the current window."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            return self.limit - len(self._hits.get(key, ()))

    def _prune(self, now: float) -> None:
        cutoff = now - self.window_seconds
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if not hits:
                del self._hits[key]
