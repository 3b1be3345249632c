r"""Unit tests for the Retry-After wait-limit predicate."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import Mock

import httpx
import pytest

from retryheed.limit import RetryAfterLimit
from retryheed.retry_after import RetryAfterParser
from retryheed.status_codes import RetryStatusCodes

TWO_SECONDS = timedelta(seconds=2)


def response_with(header: str | None) -> httpx.Response:
    headers = {} if header is None else {"Retry-After": header}
    return httpx.Response(429, headers=headers)


#####################################
#     Tests for RetryAfterLimit     #
#####################################


@pytest.mark.parametrize("header", [None, "0", "1", "2", "2.0", "garbage", ""])
def test_retry_after_limit_allows(header: str | None) -> None:
    assert RetryAfterLimit(TWO_SECONDS).test(response_with(header))


@pytest.mark.parametrize("header", ["3", "2.001", "100"])
def test_retry_after_limit_vetoes(header: str) -> None:
    assert not RetryAfterLimit(TWO_SECONDS).test(response_with(header))


def test_retry_after_limit_none_response() -> None:
    assert RetryAfterLimit(TWO_SECONDS).test(None)


def test_retry_after_limit_call() -> None:
    limit = RetryAfterLimit(TWO_SECONDS)
    assert limit(response_with("2"))
    assert not limit(response_with("3"))


def test_retry_after_limit_zero_maximum() -> None:
    limit = RetryAfterLimit(timedelta(0))
    assert limit(response_with("0"))
    assert not limit(response_with("1"))


def test_retry_after_limit_custom_parser() -> None:
    limit = RetryAfterLimit(TWO_SECONDS, parser=RetryAfterParser.seconds_only())
    # Decimal seconds are not recognized, so the header cannot veto the retry
    assert limit(response_with("2.5"))
    assert not limit(response_with("3"))


def test_retry_after_limit_uses_parser() -> None:
    parser = Mock(return_value=timedelta(seconds=5))
    response = response_with(None)
    assert not RetryAfterLimit(TWO_SECONDS, parser=parser).test(response)
    parser.assert_called_once_with(response)


def test_retry_after_limit_negative_maximum() -> None:
    with pytest.raises(ValueError, match=r"maximum must be non-negative"):
        RetryAfterLimit(timedelta(seconds=-1))


def test_retry_after_limit_of_milliseconds() -> None:
    assert RetryAfterLimit.of(2000).maximum == TWO_SECONDS


def test_retry_after_limit_of_timedelta() -> None:
    assert RetryAfterLimit.of(TWO_SECONDS).maximum == TWO_SECONDS


def test_retry_after_limit_of_negative() -> None:
    with pytest.raises(ValueError, match=r"maximum must be non-negative"):
        RetryAfterLimit.of(-1)


def test_retry_after_limit_repr() -> None:
    assert repr(RetryAfterLimit.of(2000)) == "RetryAfterLimit(maximum=0:00:02)"


def test_retry_after_limit_mock_response_without_header(mock_response: httpx.Response) -> None:
    assert RetryAfterLimit.of(0).test(mock_response)


def test_retry_after_limit_alone_allows_success() -> None:
    retry_if = RetryAfterLimit.of(TWO_SECONDS).as_retry_if()
    assert retry_if(httpx.Response(200), None)


def test_retry_after_limit_with_status_codes_rejects_success() -> None:
    retry_if = (RetryStatusCodes.idempotent() & RetryAfterLimit.of(TWO_SECONDS)).as_retry_if()
    assert not retry_if(httpx.Response(200), None)
    assert retry_if(httpx.Response(503, headers={"Retry-After": "2"}), None)
