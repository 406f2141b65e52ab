r"""Unit tests for ExponentialBackoff strategy."""

from __future__ import annotations

import pytest

from pdfdancer.backoff import BaseBackoffStrategy, ExponentialBackoff


def test_exponential_backoff_basic() -> None:
    """Test basic exponential backoff calculation."""
    backoff = ExponentialBackoff(initial_delay=0.1, multiplier=2.0)
    assert backoff.calculate(0) == 0.1  # 0.1 * 2^0
    assert backoff.calculate(1) == 0.2  # 0.1 * 2^1
    assert backoff.calculate(2) == 0.4  # 0.1 * 2^2
    assert backoff.calculate(3) == 0.8  # 0.1 * 2^3


def test_exponential_backoff_multiplier_three() -> None:
    backoff = ExponentialBackoff(initial_delay=0.5, multiplier=3.0)
    assert [backoff.calculate(attempt) for attempt in range(3)] == [0.5, 1.5, 4.5]


def test_exponential_backoff_multiplier_one_is_constant() -> None:
    backoff = ExponentialBackoff(initial_delay=2.0, multiplier=1.0)
    assert [backoff.calculate(attempt) for attempt in range(4)] == [2.0, 2.0, 2.0, 2.0]


def test_exponential_backoff_with_max_delay() -> None:
    """Test exponential backoff with max_delay cap."""
    backoff = ExponentialBackoff(initial_delay=1.0, multiplier=2.0, max_delay=5.0)
    assert backoff.calculate(2) == 4.0
    assert backoff.calculate(3) == 5.0  # Would be 8.0, but capped
    assert backoff.calculate(10) == 5.0  # Would be 1024.0, but capped


def test_exponential_backoff_non_decreasing() -> None:
    backoff = ExponentialBackoff(initial_delay=0.3, multiplier=1.7, max_delay=20.0)
    delays = [backoff.calculate(attempt) for attempt in range(30)]
    assert delays == sorted(delays)
    assert all(delay <= 20.0 for delay in delays)


def test_exponential_backoff_huge_attempt_is_capped() -> None:
    """Test that an overflowing power is clamped to max_delay."""
    backoff = ExponentialBackoff(initial_delay=1.0, multiplier=2.0, max_delay=10.0)
    assert backoff.calculate(100_000) == 10.0


def test_exponential_backoff_zero_initial_delay_huge_attempt() -> None:
    backoff = ExponentialBackoff(initial_delay=0.0, multiplier=2.0, max_delay=10.0)
    assert backoff.calculate(100_000) == 0.0


def test_exponential_backoff_is_strategy() -> None:
    assert isinstance(ExponentialBackoff(), BaseBackoffStrategy)


def test_exponential_backoff_repr() -> None:
    assert repr(ExponentialBackoff(initial_delay=1.0, multiplier=2.0, max_delay=5.0)) == (
        "ExponentialBackoff(initial_delay=1.0, multiplier=2.0, max_delay=5.0)"
    )


def test_exponential_backoff_invalid_initial_delay() -> None:
    with pytest.raises(ValueError, match=r"initial_delay must be non-negative"):
        ExponentialBackoff(initial_delay=-1.0)


def test_exponential_backoff_invalid_multiplier() -> None:
    with pytest.raises(ValueError, match=r"multiplier must be >= 1"):
        ExponentialBackoff(multiplier=0.5)


def test_exponential_backoff_invalid_max_delay() -> None:
    with pytest.raises(ValueError, match=r"max_delay must be positive"):
        ExponentialBackoff(initial_delay=1.0, max_delay=0)
