"""Unit tests for the in-memory rate limiter adapter."""

from unittest.mock import Mock

import pytest

from tuition_lookup.adapters.rate_limit.in_memory import InMemoryWindowRateLimiter


def test_allows_ten_then_blocks_the_eleventh() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryWindowRateLimiter(limit=10, window_seconds=60, clock=clock)

    for _ in range(10):
        assert limiter.consume("k").allowed is True

    blocked = limiter.consume("k")
    assert blocked.allowed is False
    assert blocked.remaining == 0
    assert blocked.retry_after_seconds == 60


def test_remaining_counts_down() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryWindowRateLimiter(limit=3, window_seconds=60, clock=clock)

    assert limiter.consume("k").remaining == 2
    assert limiter.consume("k").remaining == 1
    last = limiter.consume("k")
    assert last.allowed is True
    assert last.remaining == 0


def test_window_resets_exactly_window_seconds_after_first_request() -> None:
    clock = Mock(return_value=1000.5)
    limiter = InMemoryWindowRateLimiter(limit=2, window_seconds=60, clock=clock)

    assert limiter.consume("k").allowed is True
    clock.return_value = 1030.0
    assert limiter.consume("k").allowed is True

    clock.return_value = 1060.4
    blocked = limiter.consume("k")
    assert blocked.allowed is False
    assert blocked.retry_after_seconds == 1

    clock.return_value = 1060.5
    fresh = limiter.consume("k")
    assert fresh.allowed is True
    assert fresh.remaining == 1


def test_window_starts_at_first_request_not_clock_boundary() -> None:
    clock = Mock(return_value=1059.0)
    limiter = InMemoryWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    assert limiter.consume("k").allowed is True

    # An epoch-aligned window would have reset at 1080
    clock.return_value = 1081.0
    assert limiter.consume("k").allowed is False

    clock.return_value = 1119.0
    assert limiter.consume("k").allowed is True


def test_blocked_requests_do_not_extend_the_window() -> None:
    clock = Mock(return_value=0.0)
    limiter = InMemoryWindowRateLimiter(limit=1, window_seconds=10, clock=clock)

    limiter.consume("k")
    for t in (1.0, 5.0, 9.0):
        clock.return_value = t
        assert limiter.consume("k").allowed is False

    clock.return_value = 10.0
    assert limiter.consume("k").allowed is True


def test_isolated_by_key() -> None:
    clock = Mock(return_value=1000.0)
    limiter = InMemoryWindowRateLimiter(limit=1, window_seconds=60, clock=clock)

    assert limiter.consume("k1").allowed is True
    assert limiter.consume("k1").allowed is False

    assert limiter.consume("k2").allowed is True


def test_allow_is_boolean_shorthand() -> None:
    limiter = InMemoryWindowRateLimiter(limit=1, window_seconds=60, clock=lambda: 0.0)

    assert limiter.allow("k") is True
    assert limiter.allow("k") is False


def test_expired_entries_pruned_when_table_is_full() -> None:
    clock = Mock(return_value=0.0)
    limiter = InMemoryWindowRateLimiter(limit=5, window_seconds=10, clock=clock, max_keys=3)

    for key in ("a", "b", "c"):
        limiter.consume(key)
    assert len(limiter) == 3

    clock.return_value = 5.0
    limiter.consume("d")
    # Nothing had expired yet, so every entry is kept
    assert len(limiter) == 4

    clock.return_value = 20.0
    limiter.consume("e")
    assert len(limiter) == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0, "window_seconds": 60},
        {"limit": 1, "window_seconds": 0},
        {"limit": 1, "window_seconds": 60, "max_keys": 0},
    ],
)
def test_invalid_constructor_args(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        InMemoryWindowRateLimiter(**kwargs)


def test_empty_key_rejected() -> None:
    limiter = InMemoryWindowRateLimiter(limit=1, window_seconds=60)

    with pytest.raises(ValueError):
        limiter.consume("")
