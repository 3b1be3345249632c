r"""Retry policies combining status codes, wait limits and intervals.

This module wires the status-code table, the wait-limit predicate and
the ``Retry-After`` combinator into the two function-shaped contracts a
retry executor consumes: a predicate deciding whether to retry after a
response, and an interval function deciding how long to wait.
"""

from __future__ import annotations

__all__ = ["RetryAfterPolicy"]

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryheed.config import DEFAULT_WAIT_DURATION
from retryheed.heed import HeedRetryAfter
from retryheed.interval.constant import ConstantInterval
from retryheed.limit import RetryAfterLimit
from retryheed.status_codes import RetryStatusCodes

if TYPE_CHECKING:
    import httpx

    from retryheed.heed import IntervalFunction, Outcome
    from retryheed.predicate import BaseResponsePredicate


@dataclass(frozen=True)
class RetryAfterPolicy:
    """Predicate and interval function for a retry executor.

    Attributes:
        predicate: The predicate deciding whether a response allows a
            retry, or ``None`` to leave the decision to the executor.
        interval: The function computing the wait in milliseconds before
            the next attempt.

    Example:
        ```pycon
        >>> import httpx
        >>> from datetime import timedelta
        >>> from retryheed.policy import RetryAfterPolicy
        >>> policy = RetryAfterPolicy.idempotent(limit=timedelta(seconds=5))
        >>> response = httpx.Response(503, headers={"Retry-After": "2"})
        >>> policy.should_retry(response)
        True
        >>> policy.wait_millis(1, response)
        2000
        >>> policy.should_retry(httpx.Response(503, headers={"Retry-After": "60"}))
        False

        ```
    """

    predicate: BaseResponsePredicate | None
    interval: IntervalFunction

    @classmethod
    def idempotent(
        cls,
        *codes: int,
        limit: timedelta | int | None = None,
        base: IntervalFunction | None = None,
    ) -> RetryAfterPolicy:
        """Return a policy for idempotent requests.

        Args:
            *codes: Status codes that allow a retry in addition to the
                idempotent defaults.
            limit: Optional longest acceptable ``Retry-After`` wait, as a
                ``timedelta`` or an integer number of milliseconds. If
                set, the interval also heeds the header.
            base: The interval function used without a header. Defaults
                to a constant wait of 500 milliseconds.
        """
        return cls._with_codes(RetryStatusCodes.idempotent(*codes), limit, base)

    @classmethod
    def non_idempotent(
        cls,
        *codes: int,
        limit: timedelta | int | None = None,
        base: IntervalFunction | None = None,
    ) -> RetryAfterPolicy:
        """Return a policy for non-idempotent requests.

        Args:
            *codes: Status codes that allow a retry in addition to the
                non-idempotent defaults.
            limit: Optional longest acceptable ``Retry-After`` wait. If
                set, the interval also heeds the header.
            base: The interval function used without a header.
        """
        return cls._with_codes(RetryStatusCodes.non_idempotent(*codes), limit, base)

    @classmethod
    def only_codes(
        cls,
        *codes: int,
        limit: timedelta | int | None = None,
        base: IntervalFunction | None = None,
    ) -> RetryAfterPolicy:
        """Return a policy retrying only the given status codes.

        Args:
            *codes: The complete set of status codes that allow a retry.
            limit: Optional longest acceptable ``Retry-After`` wait. If
                set, the interval also heeds the header.
            base: The interval function used without a header.
        """
        return cls._with_codes(RetryStatusCodes.only(*codes), limit, base)

    @classmethod
    def retry_after(
        cls,
        limit: timedelta | int | None = None,
        base: IntervalFunction | None = None,
    ) -> RetryAfterPolicy:
        """Return a policy that only heeds the ``Retry-After`` header.

        Without a limit, no response triggers a retry: the policy only
        shapes the wait before retries the executor makes on exceptions.
        With a limit, any response whose header asks for an acceptable
        wait allows a retry, including responses without the header.

        A header may ask for a wait years in the future, and clock skew
        with the server can also produce unexpectedly long waits.
        Executors using no limit should bound the wait by other means,
        such as a total time budget.

        Args:
            limit: Optional longest acceptable ``Retry-After`` wait.
            base: The interval function used without a header.
        """
        predicate = None if limit is None else RetryAfterLimit.of(limit)
        return cls(predicate=predicate, interval=HeedRetryAfter.heed(_base_or_default(base)))

    @classmethod
    def _with_codes(
        cls,
        codes: RetryStatusCodes,
        limit: timedelta | int | None,
        base: IntervalFunction | None,
    ) -> RetryAfterPolicy:
        interval = _base_or_default(base)
        if limit is None:
            return cls(predicate=codes, interval=interval)
        return cls(
            predicate=codes & RetryAfterLimit.of(limit),
            interval=HeedRetryAfter.heed(interval),
        )

    def should_retry(self, response: httpx.Response | Any | None) -> bool:
        """Return whether the response allows a retry.

        A missing response never allows a retry. Without a predicate,
        no response allows a retry and only the executor's exception
        handling triggers one.
        """
        if response is None or self.predicate is None:
            return False
        return self.predicate.test(response)

    def retry_if(self, response: httpx.Response | None, exception: Exception | None) -> bool:
        """Decide a retry in the ``retry_if(response, exception)`` shape.

        Exceptions always allow a retry, leaving the decision to the
        executor's own exception handling.
        """
        if exception is not None:
            return True
        return self.should_retry(response)

    def wait_millis(self, attempt: int, outcome: Outcome | None) -> int | None:
        """Return the wait in milliseconds before the next attempt."""
        return self.interval(attempt, outcome)

    def wait(self, attempt: int, outcome: Outcome | None) -> timedelta | None:
        """Return the wait before the next attempt.

        Example:
            ```pycon
            >>> import httpx
            >>> from retryheed.policy import RetryAfterPolicy
            >>> policy = RetryAfterPolicy.retry_after()
            >>> policy.wait(1, httpx.Response(429, headers={"Retry-After": "1.5"}))
            datetime.timedelta(seconds=1, microseconds=500000)

            ```
        """
        millis = self.wait_millis(attempt, outcome)
        if millis is None:
            return None
        return timedelta(milliseconds=millis)


def _base_or_default(base: IntervalFunction | None) -> IntervalFunction:
    return ConstantInterval(DEFAULT_WAIT_DURATION) if base is None else base
