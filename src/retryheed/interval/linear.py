r"""Linear wait-interval function."""

from __future__ import annotations

__all__ = ["LinearInterval"]

from datetime import timedelta

from retryheed.config import DEFAULT_WAIT_MILLIS
from retryheed.interval.base import BaseIntervalFunction
from retryheed.validation import to_millis, to_timedelta


class LinearInterval(BaseIntervalFunction):
    """Linear wait-interval function.

    Calculates the wait as: initial + increment * (attempt - 1), with an
    optional maximum.

    Args:
        initial: The wait after the first attempt, as a ``timedelta`` or
            an integer number of milliseconds (default: 500).
        increment: The amount added for each further attempt (default:
            the same as ``initial``).
        max_wait: Optional maximum wait.

    Raises:
        ValueError: If a wait is negative, or if ``max_wait`` is less
            than ``initial``.

    Example:
        ```pycon
        >>> from retryheed.interval import LinearInterval
        >>> interval = LinearInterval(initial=1000)
        >>> interval.calculate(1)
        1000
        >>> interval.calculate(3)
        3000
        >>> interval = LinearInterval(initial=1000, increment=500, max_wait=2000)
        >>> interval.calculate(2)
        1500
        >>> interval.calculate(10)
        2000

        ```
    """

    def __init__(
        self,
        initial: timedelta | int = DEFAULT_WAIT_MILLIS,
        increment: timedelta | int | None = None,
        max_wait: timedelta | int | None = None,
    ) -> None:
        self.initial = to_timedelta("initial", initial)
        self.increment = self.initial if increment is None else to_timedelta("increment", increment)
        self.max_wait = None if max_wait is None else to_timedelta("max_wait", max_wait)
        if self.max_wait is not None and self.max_wait < self.initial:
            msg = f"max_wait must be >= initial ({self.initial}), got {self.max_wait}"
            raise ValueError(msg)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(initial={self.initial}, "
            f"increment={self.increment}, max_wait={self.max_wait})"
        )

    def calculate(self, attempt: int) -> int:
        """Calculate linear wait.

        Args:
            attempt: The number of attempts made so far (1-indexed).

        Returns:
            The wait in milliseconds, capped at max_wait if set.
        """
        delay = to_millis(self.initial) + to_millis(self.increment) * (attempt - 1)
        if self.max_wait is not None:
            delay = min(delay, to_millis(self.max_wait))
        return delay
