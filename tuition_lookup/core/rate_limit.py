"""Rate limiting dependency for FastAPI routes.

Wires the limiter adapter into the HTTP layer. Clients are identified by the
first ``X-Forwarded-For`` entry when the app sits behind a trusted proxy,
otherwise by the socket peer address.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from tuition_lookup.adapters.rate_limit.base import AbstractRateLimiter
from tuition_lookup.adapters.rate_limit.in_memory import InMemoryWindowRateLimiter
from tuition_lookup.core.config import settings
from tuition_lookup.core.errors import RateLimitedError

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, int] | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide limiter, rebuilding it if settings changed.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
        settings.app.rate_limit_max_keys,
    )

    if _limiter is None or _limiter_config != config:
        _limiter = InMemoryWindowRateLimiter(
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
            max_keys=settings.app.rate_limit_max_keys,
        )
        _limiter_config = config

    return _limiter


def client_key(request: Request) -> str:
    """Build the limiter key for the current request."""

    if settings.app.trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return f"ip:{first_hop}"

    client_host = request.client.host if request.client else None
    return f"ip:{client_host or 'unknown'}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing the address."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the per-client lookup budget.

    Raises:
        RateLimitedError: 429 when the client exceeded its budget.
    """

    if not settings.app.rate_limit_enabled:
        return

    key = client_key(request)
    key_hash = _hash_limiter_key(key)
    result = get_rate_limiter().consume(key)

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": result.limit,
            "window_s": settings.app.rate_limit_window_seconds,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] | None = None
    if settings.app.rate_limit_include_headers:
        headers = {
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(result.limit),
            "X-RateLimit-Remaining": str(result.remaining),
            "X-RateLimit-Reset": str(result.reset_at),
        }

    raise RateLimitedError(
        details={"retry_after": retry_after},
        headers=headers,
    )
