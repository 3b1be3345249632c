r"""Unit tests for construction-time validation."""

from __future__ import annotations

from datetime import timedelta

import pytest
from coola.equality import objects_are_equal

from retryheed.validation import (
    to_millis,
    to_timedelta,
    validate_duration,
    validate_status_codes,
)

###########################################
#     Tests for validate_status_codes     #
###########################################


def test_validate_status_codes() -> None:
    assert objects_are_equal(validate_status_codes([100, 429, 599]), (100, 429, 599))


def test_validate_status_codes_empty() -> None:
    assert validate_status_codes([]) == ()


def test_validate_status_codes_generator() -> None:
    assert objects_are_equal(validate_status_codes(code for code in (503, 504)), (503, 504))


@pytest.mark.parametrize("code", [99, 600, -1])
def test_validate_status_codes_out_of_range(code: int) -> None:
    with pytest.raises(ValueError, match=rf"status code must be in range 100..599, got {code}"):
        validate_status_codes([200, code])


@pytest.mark.parametrize("code", ["200", 200.0, False])
def test_validate_status_codes_not_int(code: object) -> None:
    with pytest.raises(ValueError, match=r"status code must be an int"):
        validate_status_codes([code])  # type: ignore[list-item]


#######################################
#     Tests for validate_duration     #
#######################################


@pytest.mark.parametrize("value", [timedelta(0), timedelta(seconds=1)])
def test_validate_duration(value: timedelta) -> None:
    validate_duration("wait", value)


def test_validate_duration_negative() -> None:
    with pytest.raises(ValueError, match=r"wait must be non-negative"):
        validate_duration("wait", timedelta(microseconds=-1))


##################################
#     Tests for to_timedelta     #
##################################


def test_to_timedelta_int() -> None:
    assert to_timedelta("wait", 1500) == timedelta(milliseconds=1500)


def test_to_timedelta_timedelta() -> None:
    assert to_timedelta("wait", timedelta(seconds=3)) == timedelta(seconds=3)


@pytest.mark.parametrize("value", [1.5, "1", None, True])
def test_to_timedelta_invalid_type(value: object) -> None:
    with pytest.raises(ValueError, match=r"limit must be a timedelta or an int"):
        to_timedelta("limit", value)  # type: ignore[arg-type]


def test_to_timedelta_negative() -> None:
    with pytest.raises(ValueError, match=r"limit must be non-negative"):
        to_timedelta("limit", -5)


###############################
#     Tests for to_millis     #
###############################


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (timedelta(0), 0),
        (timedelta(microseconds=999), 0),
        (timedelta(seconds=1, microseconds=1999), 1001),
        (timedelta(days=1), 86_400_000),
    ],
)
def test_to_millis(value: timedelta, expected: int) -> None:
    assert to_millis(value) == expected
