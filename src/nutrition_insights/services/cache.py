"""Simple cache abstractions."""

import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Drop a cached value if present."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


class InMemoryCache(Cache):
    """Process-local cache with TTL expiry and a size bound.

    All access goes through a single lock; concurrent writers to the same
    key resolve as last writer wins.
    """

    def __init__(self, max_entries: int = 1024) -> None:
        self._entries: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()
        self.max_entries = max_entries

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if datetime.now(tz=UTC) >= entry.expires_at:
                self._entries.pop(key, None)
                return None
            return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        now = datetime.now(tz=UTC)
        expires_at = now + timedelta(seconds=ttl_seconds)
        with self._lock:
            self._entries.pop(key, None)
            if len(self._entries) >= self.max_entries:
                self._evict(now)
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def delete(self, key: str) -> None:
        """Remove a cached value."""
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if entry.expires_at <= now
        ]
        for key in expired:
            del self._entries[key]
        while len(self._entries) >= self.max_entries:
            # dicts keep insertion order, so the first key is the oldest write
            oldest = next(iter(self._entries))
            del self._entries[oldest]
