r"""Composable predicates over HTTP responses.

This module provides the base class shared by the status-code table and
the wait-limit predicate, so they can be combined with ``&`` into the
single decision an external retry executor consults.
"""

from __future__ import annotations

__all__ = ["AllOf", "BaseResponsePredicate"]

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

logger: logging.Logger = logging.getLogger(__name__)


class BaseResponsePredicate(ABC):
    """Abstract base class for predicates deciding whether to retry
    after an HTTP response.

    Subclasses are expected to be immutable, so that a single instance
    can be shared by concurrent retry loops.
    """

    @abstractmethod
    def test(self, response: httpx.Response | Any | None) -> bool:
        """Decide whether the response allows a retry.

        Args:
            response: The HTTP response to evaluate, or ``None`` if no
                response is available.

        Returns:
            ``True`` if a retry is allowed, otherwise ``False``.
        """

    def __call__(self, response: httpx.Response | Any | None) -> bool:
        return self.test(response)

    def __and__(self, other: BaseResponsePredicate) -> AllOf:
        if not isinstance(other, BaseResponsePredicate):
            return NotImplemented
        return AllOf(self, other)

    def as_retry_if(self) -> Callable[[httpx.Response | None, Exception | None], bool]:
        """Adapt this predicate to a ``retry_if(response, exception)``
        callable.

        Exceptions carry no response to veto, so they always allow a
        retry and the executor decides on its own whether to retry them.

        Returns:
            A callable taking an optional response and an optional
            exception.

        Example:
            ```pycon
            >>> import httpx
            >>> from retryheed.status_codes import RetryStatusCodes
            >>> retry_if = RetryStatusCodes.idempotent().as_retry_if()
            >>> retry_if(httpx.Response(503), None)
            True
            >>> retry_if(httpx.Response(404), None)
            False
            >>> retry_if(None, httpx.ConnectError("boom"))
            True

            ```
        """

        def retry_if(response: httpx.Response | None, exception: Exception | None) -> bool:
            if exception is not None:
                return True
            return self.test(response)

        return retry_if


class AllOf(BaseResponsePredicate):
    """Predicate that allows a retry only if every wrapped predicate
    allows it.

    Evaluation stops at the first predicate that vetoes the retry.
    Nested ``AllOf`` predicates are flattened.

    Args:
        *predicates: The predicates to combine.

    Raises:
        ValueError: If no predicate is given.

    Example:
        ```pycon
        >>> import httpx
        >>> from retryheed.limit import RetryAfterLimit
        >>> from retryheed.status_codes import RetryStatusCodes
        >>> predicate = RetryStatusCodes.idempotent() & RetryAfterLimit.of(2000)
        >>> predicate(httpx.Response(503, headers={"Retry-After": "2"}))
        True
        >>> predicate(httpx.Response(503, headers={"Retry-After": "3"}))
        False

        ```
    """

    def __init__(self, *predicates: BaseResponsePredicate) -> None:
        if not predicates:
            msg = "at least one predicate is required"
            raise ValueError(msg)
        flattened: list[BaseResponsePredicate] = []
        for predicate in predicates:
            if isinstance(predicate, AllOf):
                flattened.extend(predicate.predicates)
            else:
                flattened.append(predicate)
        self._predicates = tuple(flattened)

    def __repr__(self) -> str:
        args = ", ".join(repr(predicate) for predicate in self._predicates)
        return f"{self.__class__.__qualname__}({args})"

    @property
    def predicates(self) -> tuple[BaseResponsePredicate, ...]:
        """The combined predicates, in evaluation order."""
        return self._predicates

    def test(self, response: httpx.Response | Any | None) -> bool:
        for predicate in self._predicates:
            if not predicate.test(response):
                logger.debug(f"Retry vetoed by {predicate!r}")
                return False
        return True
