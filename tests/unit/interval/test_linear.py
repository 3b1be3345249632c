r"""Unit tests for LinearInterval."""

from __future__ import annotations

from datetime import timedelta

import pytest

from retryheed.interval.linear import LinearInterval


def test_linear_interval_basic() -> None:
    """Test basic linear wait calculation."""
    interval = LinearInterval(initial=1000)
    assert interval.calculate(1) == 1000
    assert interval.calculate(2) == 2000
    assert interval.calculate(3) == 3000


def test_linear_interval_increment() -> None:
    interval = LinearInterval(initial=1000, increment=250)
    assert interval.calculate(1) == 1000
    assert interval.calculate(2) == 1250
    assert interval.calculate(5) == 2000


def test_linear_interval_max_wait() -> None:
    """Test linear wait with max_wait cap."""
    interval = LinearInterval(initial=1000, max_wait=timedelta(seconds=2.5))
    assert interval.calculate(2) == 2000
    assert interval.calculate(3) == 2500
    assert interval.calculate(100) == 2500


def test_linear_interval_defaults() -> None:
    interval = LinearInterval()
    assert interval.initial == timedelta(milliseconds=500)
    assert interval.increment == timedelta(milliseconds=500)
    assert interval.max_wait is None


def test_linear_interval_negative_initial() -> None:
    with pytest.raises(ValueError, match=r"initial must be non-negative"):
        LinearInterval(initial=-1)


def test_linear_interval_negative_increment() -> None:
    with pytest.raises(ValueError, match=r"increment must be non-negative"):
        LinearInterval(increment=-1)


def test_linear_interval_max_wait_below_initial() -> None:
    with pytest.raises(ValueError, match=r"max_wait must be >= initial"):
        LinearInterval(initial=1000, max_wait=500)
