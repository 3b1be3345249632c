r"""Unit tests for retry policies."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import Mock

import httpx
import pytest

from retryheed.heed import HeedRetryAfter
from retryheed.interval import ConstantInterval, ExponentialInterval
from retryheed.policy import RetryAfterPolicy
from retryheed.predicate import AllOf
from retryheed.status_codes import RetryStatusCodes

TEST_MAXIMUM = timedelta(seconds=1)
TEST_CODE = 250
FAILURE = httpx.ReadTimeout("timeout")


def response_with(status_code: int, header: str | None = None) -> httpx.Response:
    headers = {} if header is None else {"Retry-After": header}
    return httpx.Response(status_code, headers=headers)


def check_codes(policy: RetryAfterPolicy) -> None:
    assert policy.should_retry(response_with(TEST_CODE))
    assert not policy.should_retry(response_with(200))


def check_wait_limit(policy: RetryAfterPolicy) -> None:
    assert policy.should_retry(response_with(TEST_CODE, "0"))
    assert policy.should_retry(response_with(TEST_CODE, "1"))
    assert not policy.should_retry(response_with(TEST_CODE, "2"))


def check_heeded_interval(policy: RetryAfterPolicy) -> None:
    assert isinstance(policy.interval, HeedRetryAfter)
    assert policy.wait_millis(1, FAILURE) == 500
    assert policy.wait_millis(1, response_with(TEST_CODE, "0")) == 500
    assert policy.wait_millis(1, response_with(TEST_CODE, "1")) == 1000
    assert policy.wait_millis(1, response_with(TEST_CODE, "2")) == 2000


######################################
#     Tests for RetryAfterPolicy     #
######################################


def test_idempotent() -> None:
    policy = RetryAfterPolicy.idempotent(TEST_CODE)
    assert isinstance(policy.predicate, RetryStatusCodes)
    check_codes(policy)
    assert policy.should_retry(response_with(503))
    # Without a limit the interval ignores the header
    assert policy.wait_millis(1, response_with(TEST_CODE, "2")) == 500


def test_non_idempotent() -> None:
    policy = RetryAfterPolicy.non_idempotent(TEST_CODE)
    check_codes(policy)
    assert not policy.should_retry(response_with(503))


def test_only_codes() -> None:
    policy = RetryAfterPolicy.only_codes(TEST_CODE)
    check_codes(policy)
    assert not policy.should_retry(response_with(429))


@pytest.mark.parametrize(
    "factory",
    [RetryAfterPolicy.idempotent, RetryAfterPolicy.non_idempotent, RetryAfterPolicy.only_codes],
)
def test_with_maximum(factory: object) -> None:
    policy = factory(TEST_CODE, limit=TEST_MAXIMUM)
    assert isinstance(policy.predicate, AllOf)
    check_codes(policy)
    check_wait_limit(policy)
    check_heeded_interval(policy)


def test_with_maximum_milliseconds() -> None:
    policy = RetryAfterPolicy.only_codes(TEST_CODE, limit=1000)
    check_wait_limit(policy)


def test_with_base_interval() -> None:
    base = ExponentialInterval(initial=1000, multiplier=2.0)
    policy = RetryAfterPolicy.idempotent(limit=10_000, base=base)
    assert policy.wait_millis(3, response_with(503, "1")) == 4000
    assert policy.wait_millis(1, response_with(503, "3")) == 3000


def test_without_limit_uses_base_interval() -> None:
    base = ConstantInterval(100)
    assert RetryAfterPolicy.idempotent(base=base).interval is base


def test_retry_after_unlimited() -> None:
    policy = RetryAfterPolicy.retry_after()
    assert policy.predicate is None
    check_heeded_interval(policy)


@pytest.mark.parametrize("status_code", [200, 204, 429, 503])
def test_retry_after_unlimited_never_retries_responses(status_code: int) -> None:
    policy = RetryAfterPolicy.retry_after()
    assert not policy.should_retry(httpx.Response(status_code))
    assert not policy.should_retry(response_with(status_code, "1"))
    assert not policy.retry_if(httpx.Response(status_code), None)


def test_retry_after_unlimited_retries_exceptions() -> None:
    assert RetryAfterPolicy.retry_after().retry_if(None, FAILURE)


def test_retry_after_limited() -> None:
    policy = RetryAfterPolicy.retry_after(TEST_MAXIMUM)
    check_wait_limit(policy)
    check_heeded_interval(policy)


def test_should_retry_none() -> None:
    assert not RetryAfterPolicy.retry_after().should_retry(None)


def test_retry_if() -> None:
    policy = RetryAfterPolicy.idempotent(limit=TEST_MAXIMUM)
    assert policy.retry_if(response_with(503, "1"), None)
    assert not policy.retry_if(response_with(503, "5"), None)
    assert not policy.retry_if(response_with(404), None)
    assert policy.retry_if(None, FAILURE)


def test_wait() -> None:
    policy = RetryAfterPolicy.retry_after()
    assert policy.wait(1, response_with(429, "1.5")) == timedelta(milliseconds=1500)


def test_wait_abstains() -> None:
    policy = RetryAfterPolicy(predicate=None, interval=Mock(return_value=None))
    assert policy.wait(1, FAILURE) is None
    assert policy.wait_millis(1, FAILURE) is None


def test_invalid_code() -> None:
    with pytest.raises(ValueError, match=r"status code must be in range"):
        RetryAfterPolicy.idempotent(600)


def test_invalid_limit() -> None:
    with pytest.raises(ValueError, match=r"maximum must be non-negative"):
        RetryAfterPolicy.retry_after(limit=-1)


def test_policy_is_frozen() -> None:
    policy = RetryAfterPolicy.retry_after()
    with pytest.raises(AttributeError):
        policy.predicate = None  # type: ignore[misc]


def test_retry_after_with_mock_interval(mock_interval: Mock) -> None:
    policy = RetryAfterPolicy.retry_after(base=mock_interval)
    assert policy.wait_millis(2, response_with(503, "3")) == 3000
    assert policy.wait_millis(2, FAILURE) == 1000
    mock_interval.assert_called_with(2, FAILURE)


def test_idempotent_mock_response(mock_response: httpx.Response) -> None:
    assert RetryAfterPolicy.idempotent(limit=0).should_retry(mock_response)
