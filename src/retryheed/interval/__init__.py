r"""Base wait-interval functions for retry backoff.

This package provides interval functions computing the wait in
milliseconds before the next attempt, following constant, linear and
exponential patterns. They are the usual functions wrapped by
``retryheed.heed.HeedRetryAfter``.
"""

from __future__ import annotations

__all__ = [
    "BaseIntervalFunction",
    "ConstantInterval",
    "ExponentialInterval",
    "LinearInterval",
]

from retryheed.interval.base import BaseIntervalFunction
from retryheed.interval.constant import ConstantInterval
from retryheed.interval.exponential import ExponentialInterval
from retryheed.interval.linear import LinearInterval
