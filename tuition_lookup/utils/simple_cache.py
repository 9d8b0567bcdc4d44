"""In-memory TTL cache for sheet grids.

Keeps a recently fetched grid for a short time so bursts of lookups do not
hit the spreadsheet API once per request. Thread-safe.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from hashlib import sha256

logger = logging.getLogger(__name__)


Grid = list[list[str]]


@dataclass
class CacheItem:
    """Container for cached values with expiration metadata."""

    value: Grid
    expires_at: float


class SimpleTTLCache:
    """Thread-safe, in-memory TTL cache.

    Entries are keyed by grid source, so it holds one entry per configured
    sheet tab. Expired entries are dropped on read and on write.

    Attributes:
        ttl_seconds: Time-to-live applied to all entries (0 disables caching).
    """

    def __init__(self, ttl_seconds: int = 60) -> None:
        self._ttl = ttl_seconds
        self._store: dict[str, CacheItem] = {}
        self._lock = threading.RLock()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"SimpleTTLCache(ttl_seconds={self._ttl}, size={len(self._store)})"

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def get(self, key: str) -> Grid | None:
        """Return the cached grid, or None when absent or expired."""

        with self._lock:
            item = self._store.get(key)
            if item is None:
                logger.debug("cache.miss", extra={"cache_key": key[:16], "reason": "not_found"})
                return None

            if time.time() >= item.expires_at:
                del self._store[key]
                logger.debug("cache.miss", extra={"cache_key": key[:16], "reason": "expired"})
                return None

            logger.debug("cache.hit", extra={"cache_key": key[:16]})
            return item.value

    def set(self, key: str, value: Grid) -> None:
        """Store a grid with the configured TTL."""

        if self._ttl <= 0:
            return

        with self._lock:
            now = time.time()
            for expired in [k for k, item in self._store.items() if item.expires_at <= now]:
                del self._store[expired]
            self._store[key] = CacheItem(value=value, expires_at=now + self._ttl)

            logger.debug(
                "cache.set",
                extra={"cache_key": key[:16], "size": len(self._store), "ttl_s": self._ttl},
            )

    def clear(self) -> None:
        """Remove all cached entries."""

        with self._lock:
            self._store.clear()


def build_cache_key(*parts: str) -> str:
    """Build a stable cache key from identifying strings (sheet id, tab, ...).

    Returns:
        Hex-encoded SHA-256 digest string.
    """

    hasher = sha256()
    for part in parts:
        hasher.update(part.encode("utf-8"))
        hasher.update(b"\x00")
    return hasher.hexdigest()
