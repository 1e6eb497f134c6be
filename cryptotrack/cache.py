# cryptotrack/cache.py
# Purpose: in-process response cache in front of the market-data provider.
# Keys are structured tuples, so ("coins", page=1, limit=10) can never collide
# with ("coins", page=11, limit=0).
# Pitfalls: not persistent and unbounded; stale entries stay until the next put.

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any

from cryptotrack.observability import CACHE_REQUESTS

CacheKey = tuple[str, tuple[tuple[str, Hashable], ...]]

DEFAULT_TTL_SEC = 60.0


def make_key(resource: str, **params: Hashable) -> CacheKey:
    """Build a deterministic key from a resource name and its parameters."""
    return (resource, tuple(sorted(params.items())))


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    payload: Any
    fetched_at: float


class TTLCache:
    """Maps a CacheKey to the last fetched payload, served while fresh."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SEC, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl_seconds)
        self._clock = clock
        self._store: dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Any | None:
        """Return the cached payload if it is younger than the TTL, else None."""
        with self._lock:
            entry = self._store.get(key)
            now = self._clock()
        if entry is None or now - entry.fetched_at >= self.ttl:
            CACHE_REQUESTS.labels(resource=key[0], result="miss").inc()
            return None
        CACHE_REQUESTS.labels(resource=key[0], result="hit").inc()
        return entry.payload

    def put(self, key: CacheKey, payload: Any) -> None:
        with self._lock:
            self._store[key] = CacheEntry(key=key, payload=payload, fetched_at=self._clock())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
