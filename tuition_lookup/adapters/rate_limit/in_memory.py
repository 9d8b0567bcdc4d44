"""In-memory per-client window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from tuition_lookup.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class RateLimitEntry:
    count: int
    window_reset_at: float


class InMemoryWindowRateLimiter(AbstractRateLimiter):
    """Limit requests per key within a window opened by the key's first request.

    The first request of a client (or the first one after its window has
    elapsed) starts a new window of ``window_seconds`` with a count of 1.
    Later requests in the same window are allowed while the count is below
    ``limit``. With ``limit=10`` the 11th request inside a window is blocked,
    and the window ends exactly ``window_seconds`` after its first request.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        clock: Callable[[], float] = time.time,
        max_keys: int = 10_000,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of requests per window.
            window_seconds: Window length in seconds.
            clock: Time source returning UNIX time in seconds.
            max_keys: Table size above which expired entries are pruned.

        Raises:
            ValueError: If an argument is out of range.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        if max_keys < 1:
            raise ValueError("max_keys must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._max_keys = max_keys
        self._lock = threading.RLock()
        self._entries: dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune_expired_locked(self, now: float) -> None:
        expired = [k for k, entry in self._entries.items() if now >= entry.window_reset_at]
        for key in expired:
            del self._entries[key]

    def consume(self, key: str) -> RateLimitResult:
        """Count one request for ``key``.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock()

        with self._lock:
            entry = self._entries.get(key)

            if entry is None or now >= entry.window_reset_at:
                if entry is None and len(self._entries) >= self._max_keys:
                    self._prune_expired_locked(now)
                entry = RateLimitEntry(count=1, window_reset_at=now + self._window_seconds)
                self._entries[key] = entry
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - 1,
                    reset_at=int(math.ceil(entry.window_reset_at)),
                    retry_after_seconds=None,
                )

            if entry.count >= self._limit:
                return RateLimitResult(
                    allowed=False,
                    limit=self._limit,
                    remaining=0,
                    reset_at=int(math.ceil(entry.window_reset_at)),
                    retry_after_seconds=max(1, int(math.ceil(entry.window_reset_at - now))),
                )

            entry.count += 1
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=self._limit - entry.count,
                reset_at=int(math.ceil(entry.window_reset_at)),
                retry_after_seconds=None,
            )
