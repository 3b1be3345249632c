r"""Predicate vetoing retries that would wait too long.

This module provides a predicate that prevents a retry when the
response carries a ``Retry-After`` header asking for a longer wait than
the caller is willing to honor.
"""

from __future__ import annotations

__all__ = ["RetryAfterLimit"]

import logging
from typing import TYPE_CHECKING, Any

from retryheed.predicate import BaseResponsePredicate
from retryheed.retry_after import RetryAfterParser
from retryheed.validation import to_timedelta, validate_duration

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import timedelta

    import httpx

logger: logging.Logger = logging.getLogger(__name__)


class RetryAfterLimit(BaseResponsePredicate):
    """Predicate to prevent a retry if a ``Retry-After`` header asks for
    too long a wait.

    Missing or unparseable headers always allow a retry: the predicate
    only vetoes when it can prove the wait exceeds the maximum.
    On its own it therefore allows a retry after any response without
    the header, successful ones included. Combine it with a status
    predicate, as in ``RetryStatusCodes.idempotent() & limit``, before
    using it as a ``retry_if`` hook.

    Args:
        maximum: The longest wait that is acceptable.
        parser: The function reading the ``Retry-After`` header from a
            response. Defaults to ``RetryAfterParser.extended()``.

    Raises:
        ValueError: If ``maximum`` is negative.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> import httpx
        >>> from retryheed.limit import RetryAfterLimit
        >>> limit = RetryAfterLimit(timedelta(seconds=2))
        >>> limit(httpx.Response(503, headers={"Retry-After": "2"}))
        True
        >>> limit(httpx.Response(503, headers={"Retry-After": "3"}))
        False
        >>> limit(httpx.Response(503))
        True

        ```
    """

    def __init__(
        self,
        maximum: timedelta,
        parser: Callable[[httpx.Response | Any], timedelta | None] | None = None,
    ) -> None:
        validate_duration("maximum", maximum)
        self._maximum = maximum
        self._parser = parser or RetryAfterParser.extended()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(maximum={self._maximum})"

    @classmethod
    def of(cls, limit: timedelta | int) -> RetryAfterLimit:
        """Return a limit using the extended parser.

        Args:
            limit: The longest acceptable wait, as a ``timedelta`` or an
                integer number of milliseconds.

        Example:
            ```pycon
            >>> from retryheed.limit import RetryAfterLimit
            >>> RetryAfterLimit.of(2000).maximum
            datetime.timedelta(seconds=2)

            ```
        """
        return cls(to_timedelta("maximum", limit))

    @property
    def maximum(self) -> timedelta:
        """The longest wait that is acceptable."""
        return self._maximum

    def test(self, response: httpx.Response | Any | None) -> bool:
        wait = self._parser(response)
        if wait is None or wait <= self._maximum:
            return True
        logger.debug(f"Retry-After wait of {wait} exceeds the maximum of {self._maximum}")
        return False
