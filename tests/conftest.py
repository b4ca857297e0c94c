from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from httpmanager.shared import close_http_manager
from tests.helpers import echo_handler

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_handler() -> Mock:
    """Create a mock httpx.MockTransport handler echoing the request."""
    return Mock(side_effect=echo_handler)


@pytest.fixture
def reset_shared_manager() -> Generator[None, None, None]:
    """Make sure each test starts and ends without a shared manager."""
    close_http_manager()
    yield
    close_http_manager()
