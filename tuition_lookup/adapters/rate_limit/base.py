"""Rate limiter interfaces.

The HTTP layer depends on this abstraction so the in-process store can be
replaced by a shared one (e.g. Redis) when running several workers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single ``consume`` call.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the client's window ends.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Count one request for ``key`` and decide whether it is allowed.

        Args:
            key: Client identifier (e.g. forwarded IP address).

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

    def allow(self, key: str) -> bool:
        """Boolean shorthand for ``consume(key).allowed``."""
        return self.consume(key).allowed
