r"""Construction-time validation utilities.

This module provides validation functions for the arguments used to
build status-code tables, wait limits and interval functions. Invalid
arguments are programmer errors, so they raise ``ValueError``
immediately instead of surfacing in the middle of a retry loop.
"""

from __future__ import annotations

__all__ = ["to_millis", "to_timedelta", "validate_duration", "validate_status_codes"]

from datetime import timedelta
from typing import TYPE_CHECKING

from retryheed.config import MAX_STATUS_CODE, MIN_STATUS_CODE

if TYPE_CHECKING:
    from collections.abc import Iterable

_ONE_MILLISECOND = timedelta(milliseconds=1)


def validate_status_codes(codes: Iterable[int]) -> tuple[int, ...]:
    """Validate a collection of HTTP status codes.

    Args:
        codes: The status codes to validate.

    Returns:
        The status codes as a tuple.

    Raises:
        ValueError: If a code is not an integer or is outside the range
            100..599.

    Example:
        ```pycon
        >>> from retryheed.validation import validate_status_codes
        >>> validate_status_codes([429, 503])
        (429, 503)
        >>> validate_status_codes([600])  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: status code must be in range 100..599, got 600

        ```
    """
    validated = tuple(codes)
    for code in validated:
        # bool is a subclass of int but never a status code
        if not isinstance(code, int) or isinstance(code, bool):
            msg = f"status code must be an int, got {code!r}"
            raise ValueError(msg)
        if not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE:
            msg = (
                f"status code must be in range {MIN_STATUS_CODE}..{MAX_STATUS_CODE}, got {code}"
            )
            raise ValueError(msg)
    return validated


def validate_duration(name: str, value: timedelta) -> None:
    """Validate that a duration is non-negative.

    Args:
        name: The argument name, used in the error message.
        value: The duration to validate.

    Raises:
        ValueError: If the duration is negative.
    """
    if value < timedelta(0):
        msg = f"{name} must be non-negative, got {value}"
        raise ValueError(msg)


def to_timedelta(name: str, value: timedelta | int) -> timedelta:
    """Convert a duration given as milliseconds or ``timedelta``.

    Args:
        name: The argument name, used in the error message.
        value: A ``timedelta``, or an integer number of milliseconds.

    Returns:
        The validated, non-negative duration.

    Raises:
        ValueError: If the value is negative or has an unsupported type.

    Example:
        ```pycon
        >>> from retryheed.validation import to_timedelta
        >>> to_timedelta("wait", 1500)
        datetime.timedelta(seconds=1, microseconds=500000)

        ```
    """
    if isinstance(value, timedelta):
        duration = value
    elif isinstance(value, int) and not isinstance(value, bool):
        duration = timedelta(milliseconds=value)
    else:
        msg = f"{name} must be a timedelta or an int number of milliseconds, got {value!r}"
        raise ValueError(msg)
    validate_duration(name, duration)
    return duration


def to_millis(value: timedelta) -> int:
    """Convert a duration to whole milliseconds, truncating any
    remainder.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from retryheed.validation import to_millis
        >>> to_millis(timedelta(seconds=1, microseconds=1999))
        1001

        ```
    """
    return value // _ONE_MILLISECOND
