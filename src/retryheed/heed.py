r"""Wait-interval functions that respect the Retry-After header.

This module provides a combinator that extends the wait computed by a
base interval function so that it is never shorter than the wait asked
for by a ``Retry-After`` header in the response.
"""

from __future__ import annotations

__all__ = ["HeedRetryAfter", "IntervalFunction", "Outcome"]

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeAlias

import httpx

from retryheed.config import DEFAULT_WAIT_DURATION
from retryheed.interval.constant import ConstantInterval
from retryheed.retry_after import RetryAfterParser
from retryheed.validation import to_millis

# Outcome of an attempt: the response, or the exception raised instead
Outcome: TypeAlias = httpx.Response | BaseException

# Computes the wait in milliseconds before the next attempt, or None to abstain
IntervalFunction: TypeAlias = Callable[[int, Outcome], int | None]

logger: logging.Logger = logging.getLogger(__name__)


class HeedRetryAfter:
    """Interval function extending a wrapped function to respect the
    ``Retry-After`` header.

    If the response carries a ``Retry-After`` header, the wait is the
    maximum of the wrapped function's wait and the wait indicated by
    the header. Otherwise, or if the attempt failed with an exception,
    the wrapped function's wait is returned unchanged. A wrapped
    function returning ``None`` does not force a result: the header
    wait is used alone when present.

    Args:
        wrapped: The function computing the wait without considering the
            header, called as ``wrapped(attempt, outcome)``.
        parser: The function reading the ``Retry-After`` header from a
            response. Defaults to ``RetryAfterParser.extended()``.

    Example:
        ```pycon
        >>> import httpx
        >>> from retryheed.heed import HeedRetryAfter
        >>> interval = HeedRetryAfter.at_least(2000)
        >>> interval(1, httpx.Response(503, headers={"Retry-After": "4"}))
        4000
        >>> interval(1, httpx.Response(503, headers={"Retry-After": "1"}))
        2000
        >>> interval(1, httpx.ConnectError("boom"))
        2000

        ```
    """

    def __init__(
        self,
        wrapped: IntervalFunction,
        parser: Callable[[httpx.Response | Any], timedelta | None] | None = None,
    ) -> None:
        self._wrapped = wrapped
        self._parser = parser or RetryAfterParser.extended()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(wrapped={self._wrapped!r})"

    @property
    def wrapped(self) -> IntervalFunction:
        """The function computing the wait without considering the
        header."""
        return self._wrapped

    @classmethod
    def at_least(cls, minimum: timedelta | int) -> HeedRetryAfter:
        """Heed the ``Retry-After`` header with a required minimum wait.

        Args:
            minimum: The minimum wait, as a ``timedelta`` or an integer
                number of milliseconds.

        Raises:
            ValueError: If ``minimum`` is negative.
        """
        return cls(ConstantInterval(minimum))

    @classmethod
    def defaulted(cls) -> HeedRetryAfter:
        """Heed the ``Retry-After`` header with the default wait of 500
        milliseconds if the header requires no longer wait."""
        return cls.at_least(DEFAULT_WAIT_DURATION)

    @classmethod
    def heed(cls, extending: IntervalFunction | None = None) -> HeedRetryAfter:
        """Heed the ``Retry-After`` header.

        Args:
            extending: The interval function to extend. If ``None``, the
                header wait is used verbatim and no wait at all is used
                when the header is absent.

        Example:
            ```pycon
            >>> import httpx
            >>> from retryheed.heed import HeedRetryAfter
            >>> from retryheed.interval import ExponentialInterval
            >>> interval = HeedRetryAfter.heed(ExponentialInterval(initial=1000, multiplier=2.0))
            >>> interval(2, httpx.Response(429, headers={"Retry-After": "1"}))
            2000
            >>> interval(2, httpx.Response(429, headers={"Retry-After": "5"}))
            5000
            >>> HeedRetryAfter.heed()(1, httpx.Response(429))
            0

            ```
        """
        if extending is None:
            return cls.at_least(0)
        return cls(extending)

    def __call__(self, attempt: int, outcome: Outcome | None) -> int | None:
        """Compute the wait before the next attempt.

        Args:
            attempt: The number of attempts made so far, passed to the
                wrapped function.
            outcome: The response of the last attempt, or the exception
                it raised.

        Returns:
            The wait in milliseconds, or ``None`` if the wrapped function
            abstains and no ``Retry-After`` header applies.
        """
        base = self._wrapped(attempt, outcome)
        if outcome is None or isinstance(outcome, BaseException):
            return base

        retry_after = self._parser(outcome)
        if retry_after is None:
            return base

        millis = to_millis(retry_after)
        wait = millis if base is None else max(millis, base)
        logger.debug(f"Waiting {wait}ms before attempt {attempt + 1} (Retry-After={millis}ms)")
        return wait
