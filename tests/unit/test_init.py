r"""Unit tests for package initialization and metadata."""

from __future__ import annotations

import httpx

import retryheed


def test_package_version_is_string() -> None:
    """Test that __version__ is a string."""
    assert isinstance(retryheed.__version__, str)


def test_package_version_format() -> None:
    """Test that __version__ follows semantic versioning."""
    assert "." in retryheed.__version__


def test_all_exports_defined() -> None:
    """Test that all items in __all__ are defined in the module."""
    for name in retryheed.__all__:
        assert hasattr(retryheed, name), f"{name} is in __all__ but not defined in module"


def test_composed_decision_and_wait() -> None:
    should_retry = retryheed.RetryStatusCodes.idempotent() & retryheed.RetryAfterLimit.of(10_000)
    interval = retryheed.HeedRetryAfter.defaulted()
    response = httpx.Response(503, headers={"Retry-After": "3"})
    assert should_retry(response)
    assert interval(1, response) == 3000
