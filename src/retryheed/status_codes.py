r"""Retry decisions based on the HTTP response status code.

This module provides a lookup table deciding whether a retry is
warranted for each HTTP status code, depending on whether the request
is idempotent. The default decisions are:

| Status | Idempotent | Non-idempotent |
|--------|------------|----------------|
| 1xx    | retry      | retry          |
| 2xx    | no retry   | no retry       |
| 3xx    | retry      | retry          |
| 4xx    | no retry   | no retry       |
| 408    | retry      | retry          |
| 409    | retry      | retry          |
| 425    | retry      | retry          |
| 429    | retry      | retry          |
| 5xx    | retry      | **no retry**   |
| 501    | no retry   | no retry       |
| 505    | no retry   | no retry       |

1xx responses are provisional, so the "retry" is to continue reading.
3xx responses are redirections; counting them as retries lets a bounded
retry budget also bound the length of a redirect loop. 5xx responses
are only retried for idempotent requests, because replaying a request
after an uncertain server failure may duplicate a side effect.
"""

from __future__ import annotations

__all__ = ["RetryStatusCodes"]

from typing import TYPE_CHECKING, Any

from retryheed.config import (
    IDEMPOTENT_SAFE_4XX,
    MAX_STATUS_CODE,
    MIN_STATUS_CODE,
    NON_RETRYABLE_5XX,
)
from retryheed.predicate import BaseResponsePredicate
from retryheed.validation import validate_status_codes

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

_TABLE_SIZE = MAX_STATUS_CODE - MIN_STATUS_CODE + 1


def _build_table(retryable: Iterable[int]) -> tuple[bool, ...]:
    table = [False] * _TABLE_SIZE
    for code in retryable:
        table[code - MIN_STATUS_CODE] = True
    return tuple(table)


def _default_codes(idempotent: bool) -> set[int]:
    codes = set(range(100, 200)) | set(range(300, 400)) | set(IDEMPOTENT_SAFE_4XX)
    if idempotent:
        codes |= set(range(500, 600)) - set(NON_RETRYABLE_5XX)
    return codes


class RetryStatusCodes(BaseResponsePredicate):
    """Predicate deciding whether a retry is allowable based on the HTTP
    status code.

    Instances are built with one of the factories ``idempotent()``,
    ``non_idempotent()`` or ``only()``. The decision table is built once
    and never changes, so an instance can be shared between threads.

    Args:
        retryable: The status codes that allow a retry.
        description: A short description used in the representation.

    Raises:
        ValueError: If a status code is outside the range 100..599.

    Example:
        ```pycon
        >>> from retryheed.status_codes import RetryStatusCodes
        >>> codes = RetryStatusCodes.idempotent()
        >>> codes.should_retry(503)
        True
        >>> codes.should_retry(501)
        False
        >>> RetryStatusCodes.idempotent(501).should_retry(501)
        True
        >>> RetryStatusCodes.non_idempotent().should_retry(503)
        False
        >>> codes.should_retry(600)
        False

        ```
    """

    def __init__(self, retryable: Iterable[int] = (), description: str = "only") -> None:
        codes = validate_status_codes(retryable)
        self._table = _build_table(codes)
        self._description = description

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}({self._description})"

    @classmethod
    def idempotent(cls, *additional: int) -> RetryStatusCodes:
        """Return the decisions for an idempotent request.

        Server errors are retried, except 501 (Not Implemented) and
        505 (HTTP Version Not Supported).

        Args:
            *additional: Status codes that are expressly allowed to
                retry. They override the defaults.
        """
        extra = validate_status_codes(additional)
        return cls(_default_codes(idempotent=True) | set(extra), _describe("idempotent", extra))

    @classmethod
    def non_idempotent(cls, *additional: int) -> RetryStatusCodes:
        """Return the decisions for a non-idempotent request.

        Server errors are never retried unless expressly allowed.

        Args:
            *additional: Status codes that are expressly allowed to
                retry. They override the defaults.
        """
        extra = validate_status_codes(additional)
        return cls(
            _default_codes(idempotent=False) | set(extra), _describe("non_idempotent", extra)
        )

    @classmethod
    def only(cls, *codes: int) -> RetryStatusCodes:
        """Return decisions that allow a retry for the given status codes
        only.

        Args:
            *codes: The status codes that allow a retry.
        """
        return cls(codes, _describe("only", tuple(codes)))

    def should_retry(self, code: int) -> bool:
        """Return whether the status code allows a retry.

        Args:
            code: The HTTP status code to check.

        Returns:
            Whether a retry is allowed. Values outside 100..599 never
            allow a retry.
        """
        if not isinstance(code, int) or not MIN_STATUS_CODE <= code <= MAX_STATUS_CODE:
            return False
        return self._table[code - MIN_STATUS_CODE]

    def retryable_codes(self) -> frozenset[int]:
        """Return all the status codes that allow a retry.

        This is useful with executors configured by a list of retryable
        status codes.

        Example:
            ```pycon
            >>> from retryheed.status_codes import RetryStatusCodes
            >>> sorted(RetryStatusCodes.only(503, 429).retryable_codes())
            [429, 503]

            ```
        """
        return frozenset(
            index + MIN_STATUS_CODE for index, retry in enumerate(self._table) if retry
        )

    def test(self, response: httpx.Response | Any | None) -> bool:
        if response is None:
            return False
        return self.should_retry(getattr(response, "status_code", None))


def _describe(mode: str, codes: tuple[int, ...]) -> str:
    if not codes:
        return mode
    return f"{mode}, {', '.join(str(code) for code in codes)}"
