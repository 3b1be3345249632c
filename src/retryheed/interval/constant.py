r"""Constant wait-interval function."""

from __future__ import annotations

__all__ = ["ConstantInterval"]

from datetime import timedelta

from retryheed.config import DEFAULT_WAIT_MILLIS
from retryheed.interval.base import BaseIntervalFunction
from retryheed.validation import to_millis, to_timedelta


class ConstantInterval(BaseIntervalFunction):
    """Constant/fixed wait-interval function.

    Returns the same wait for every attempt, regardless of the attempt
    number.

    Args:
        wait: The fixed wait, as a ``timedelta`` or an integer number of
            milliseconds (default: 500).

    Example:
        ```pycon
        >>> from retryheed.interval import ConstantInterval
        >>> interval = ConstantInterval(wait=2000)
        >>> interval.calculate(1)
        2000
        >>> interval.calculate(10)
        2000
        >>> interval(3, None)
        2000

        ```
    """

    def __init__(self, wait: timedelta | int = DEFAULT_WAIT_MILLIS) -> None:
        self.wait = to_timedelta("wait", wait)
        self._millis = to_millis(self.wait)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(wait={self._millis})"

    def calculate(self, attempt: int) -> int:  # noqa: ARG002
        """Calculate constant wait.

        Args:
            attempt: The number of attempts made so far (unused).

        Returns:
            The fixed wait in milliseconds.
        """
        return self._millis
