r"""Exponential wait-interval function."""

from __future__ import annotations

__all__ = ["ExponentialInterval"]

from datetime import timedelta

from retryheed.config import DEFAULT_WAIT_MILLIS
from retryheed.interval.base import MAX_WAIT_MILLIS, BaseIntervalFunction
from retryheed.validation import to_millis, to_timedelta

DEFAULT_MULTIPLIER = 1.5


class ExponentialInterval(BaseIntervalFunction):
    """Exponential wait-interval function.

    Calculates the wait as: initial * (multiplier ** (attempt - 1)), with
    an optional maximum.

    This is the usual choice when progressively longer waits are
    wanted between attempts.

    Args:
        initial: The wait after the first attempt, as a ``timedelta`` or
            an integer number of milliseconds (default: 500).
        multiplier: The growth factor between attempts (default: 1.5).
            Must be >= 1.
        max_wait: Optional maximum wait.

    Raises:
        ValueError: If ``initial`` is negative, ``multiplier`` is less
            than 1, or ``max_wait`` is less than ``initial``.

    Example:
        ```pycon
        >>> from retryheed.interval import ExponentialInterval
        >>> interval = ExponentialInterval(initial=1000, multiplier=2.0)
        >>> interval.calculate(1)
        1000
        >>> interval.calculate(2)
        2000
        >>> interval.calculate(3)
        4000
        >>> # With max_wait cap
        >>> interval = ExponentialInterval(initial=1000, multiplier=2.0, max_wait=5000)
        >>> interval.calculate(10)
        5000

        ```
    """

    def __init__(
        self,
        initial: timedelta | int = DEFAULT_WAIT_MILLIS,
        multiplier: float = DEFAULT_MULTIPLIER,
        max_wait: timedelta | int | None = None,
    ) -> None:
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)
        self.initial = to_timedelta("initial", initial)
        self.multiplier = multiplier
        self.max_wait = None if max_wait is None else to_timedelta("max_wait", max_wait)
        if self.max_wait is not None and self.max_wait < self.initial:
            msg = f"max_wait must be >= initial ({self.initial}), got {self.max_wait}"
            raise ValueError(msg)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(initial={self.initial}, "
            f"multiplier={self.multiplier}, max_wait={self.max_wait})"
        )

    def calculate(self, attempt: int) -> int:
        """Calculate exponential wait.

        Args:
            attempt: The number of attempts made so far (1-indexed).

        Returns:
            The wait in milliseconds, capped at max_wait if set.
        """
        ceiling = MAX_WAIT_MILLIS if self.max_wait is None else to_millis(self.max_wait)
        try:
            delay = to_millis(self.initial) * self.multiplier ** (attempt - 1)
        except OverflowError:
            return ceiling
        return int(min(delay, ceiling))
