from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from arestrava.context import CallContext
from arestrava.core import OAuthSettings
from arestrava.tokens import Tokens

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing callbacks."""
    return Mock()


@pytest.fixture
def context() -> CallContext:
    """Create a call context without deadline."""
    return CallContext()


@pytest.fixture
def settings() -> OAuthSettings:
    """Create the settings of a mock OAuth application."""
    return OAuthSettings(
        client_id="mockClientId",
        client_secret="mockClientSecret",
        redirect_uri="mockRedirecturi",
        api_base_url="https://mock.strava.test/api/v3",
    )


@pytest.fixture
def valid_tokens() -> Tokens:
    """Create tokens expiring far in the future."""
    return Tokens(access_token="access-1", refresh_token="refresh-1", expires_at=4102444800)


@pytest.fixture
def expired_tokens() -> Tokens:
    """Create tokens that expired long ago."""
    return Tokens(access_token="access-1", refresh_token="refresh-1", expires_at=1000)


@pytest.fixture
def refreshed_payload() -> dict:
    """Create the body of a successful refresh response."""
    return {
        "token_type": "Bearer",
        "access_token": "access-2",
        "refresh_token": "refresh-2",
        "expires_at": 4102448400,
        "expires_in": 21600,
    }
