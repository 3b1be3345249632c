r"""Abstract base class for wait-interval functions."""

from __future__ import annotations

__all__ = ["BaseIntervalFunction"]

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from retryheed.validation import to_millis

if TYPE_CHECKING:
    import httpx

# Longest wait representable as a timedelta, in milliseconds
MAX_WAIT_MILLIS = to_millis(timedelta.max)


class BaseIntervalFunction(ABC):
    """Abstract base class for wait-interval functions.

    An interval function determines how long to wait before the next
    attempt based on the number of attempts made so far. It is called
    with the attempt number and the outcome of the last attempt, which
    the base implementations ignore.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> int:
        """Calculate the wait before the next attempt.

        Args:
            attempt: The number of attempts made so far (1-indexed). For
                example, attempt=1 is the wait after the first attempt.

        Returns:
            The wait in milliseconds before the next attempt.
        """

    def __call__(
        self,
        attempt: int,
        outcome: httpx.Response | BaseException | Any = None,  # noqa: ARG002
    ) -> int | None:
        return self.calculate(max(attempt, 1))
