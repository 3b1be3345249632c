r"""Default configurations for HTTP retry decisions.

This module defines the constants shared by the status-code table, the
``Retry-After`` parser and the wait-interval combinators.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_WAIT_DURATION",
    "DEFAULT_WAIT_MILLIS",
    "IDEMPOTENT_SAFE_4XX",
    "MAX_STATUS_CODE",
    "MIN_STATUS_CODE",
    "NON_RETRYABLE_5XX",
    "RETRY_AFTER_HEADER",
]

from datetime import timedelta

# Name of the HTTP response header carrying the server-requested delay
RETRY_AFTER_HEADER = "Retry-After"

# Inclusive range of HTTP status codes covered by the retry table
MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

# Default wait between attempts when nothing else is specified
# This matches the default wait of common resilience engines
DEFAULT_WAIT_MILLIS = 500
DEFAULT_WAIT_DURATION = timedelta(milliseconds=DEFAULT_WAIT_MILLIS)

# 4xx status codes where the server signals a transient condition
# 408: Request Timeout - the server did not receive the complete request
# 409: Conflict - the resource state may resolve upon retry
# 425: Too Early - the server refused a request that risked replay
# 429: Too Many Requests - server-managed throttling of the client
IDEMPOTENT_SAFE_4XX = (408, 409, 425, 429)

# 5xx status codes whose failure is structural and will not change on retry
# 501: Not Implemented
# 505: HTTP Version Not Supported
NON_RETRYABLE_5XX = (501, 505)
