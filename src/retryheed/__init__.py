r"""retryheed - HTTP retry decisions and Retry-After handling.

This package provides the HTTP-specific decision logic that a retry or
backoff engine needs: which status codes warrant a retry for
idempotent and non-idempotent requests, how to read the ``Retry-After``
header in all the formats HTTP allows, and how to combine the
server-requested wait with a backoff interval. It performs no I/O and
never sleeps; an external executor calls its predicates and interval
functions.

Key Features:
    - Status-code retry tables for idempotent and non-idempotent requests
    - Lenient Retry-After parsing: integer and decimal seconds,
      IMF-fixdate, RFC-850, asctime and ISO-8601 dates
    - Injectable clock for deterministic date handling
    - Predicate vetoing retries whose Retry-After wait is too long
    - Interval combinator extending a backoff to honor Retry-After
    - Constant, linear and exponential base intervals

Example:
    ```pycon
    >>> import httpx
    >>> from retryheed import HeedRetryAfter, RetryAfterLimit, RetryStatusCodes
    >>> should_retry = RetryStatusCodes.idempotent() & RetryAfterLimit.of(10_000)
    >>> interval = HeedRetryAfter.defaulted()
    >>> response = httpx.Response(503, headers={"Retry-After": "3"})
    >>> should_retry(response)
    True
    >>> interval(1, response)
    3000

    ```
"""

from __future__ import annotations

__all__ = [
    "AllOf",
    "BaseIntervalFunction",
    "BaseResponsePredicate",
    "ConstantInterval",
    "ExponentialInterval",
    "HeedRetryAfter",
    "LinearInterval",
    "RetryAfterLimit",
    "RetryAfterParser",
    "RetryAfterPolicy",
    "RetryStatusCodes",
    "__version__",
    "parse_retry_after",
]

from importlib.metadata import PackageNotFoundError, version

from retryheed.heed import HeedRetryAfter
from retryheed.interval import (
    BaseIntervalFunction,
    ConstantInterval,
    ExponentialInterval,
    LinearInterval,
)
from retryheed.limit import RetryAfterLimit
from retryheed.policy import RetryAfterPolicy
from retryheed.predicate import AllOf, BaseResponsePredicate
from retryheed.retry_after import RetryAfterParser, parse_retry_after
from retryheed.status_codes import RetryStatusCodes

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
