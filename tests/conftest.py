from __future__ import annotations

from unittest.mock import Mock

import httpx
import pytest


@pytest.fixture
def mock_response() -> httpx.Response:
    """Create a mock httpx.Response for testing."""
    return Mock(spec=httpx.Response, status_code=503, headers=httpx.Headers())


@pytest.fixture
def mock_interval() -> Mock:
    """Create a mock interval function for testing.

    The mock always returns a wait of 1000 milliseconds.
    """
    return Mock(return_value=1000)
