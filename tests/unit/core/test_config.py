r"""Unit tests for the configuration dataclasses in core/config.py."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, asdict

import pytest
from coola.equality import objects_are_equal

from arestrava.core import (
    DEFAULT_HEADERS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_UNAUTHORIZED_RETRIES,
    DEFAULT_RETRY_INTERVAL,
    DEFAULT_TIMEOUT,
    ExecutorConfig,
    OAuthSettings,
)
from arestrava.retry import never_retry, retry_on_server_error


def test_default_constants() -> None:
    assert DEFAULT_TIMEOUT == 15.0
    assert DEFAULT_MAX_RETRIES == 2
    assert DEFAULT_RETRY_INTERVAL == 2.0
    assert DEFAULT_MAX_UNAUTHORIZED_RETRIES == 1
    assert DEFAULT_HEADERS == {"Content-Type": "application/json"}


####################################
#     Tests for ExecutorConfig     #
####################################


def test_executor_config_defaults() -> None:
    """Test that ExecutorConfig uses correct default values."""
    assert objects_are_equal(
        asdict(ExecutorConfig()),
        {
            "max_retries": 2,
            "retry_interval": 2.0,
            "retry_policy": retry_on_server_error,
            "headers": {"Content-Type": "application/json"},
            "on_request": None,
            "on_retry": None,
        },
    )


def test_executor_config_headers_are_not_shared() -> None:
    config = ExecutorConfig()
    config.headers["X-Test"] = "1"
    assert "X-Test" not in ExecutorConfig().headers
    assert "X-Test" not in DEFAULT_HEADERS


def test_executor_config_custom_values() -> None:
    config = ExecutorConfig(max_retries=5, retry_interval=0.5, retry_policy=never_retry)
    assert config.max_retries == 5
    assert config.retry_interval == 0.5
    assert config.retry_policy is never_retry


def test_executor_config_zero_values() -> None:
    config = ExecutorConfig(max_retries=0, retry_interval=0.0)
    assert config.max_retries == 0
    assert config.retry_interval == 0.0


def test_executor_config_negative_max_retries() -> None:
    with pytest.raises(ValueError, match=r"max_retries must be >= 0, got -1"):
        ExecutorConfig(max_retries=-1)


def test_executor_config_negative_retry_interval() -> None:
    with pytest.raises(ValueError, match=r"retry_interval must be >= 0, got -0.5"):
        ExecutorConfig(retry_interval=-0.5)


def test_executor_config_merge() -> None:
    config = ExecutorConfig(max_retries=3)
    merged = config.merge(retry_interval=1.0, max_retries=None)
    assert merged.max_retries == 3
    assert merged.retry_interval == 1.0
    assert config.retry_interval == DEFAULT_RETRY_INTERVAL


def test_executor_config_merge_validates() -> None:
    with pytest.raises(ValueError, match=r"max_retries must be >= 0"):
        ExecutorConfig().merge(max_retries=-2)


###################################
#     Tests for OAuthSettings     #
###################################


def test_oauth_settings_defaults() -> None:
    settings = OAuthSettings()
    assert settings.client_id == ""
    assert settings.api_base_url == "https://www.strava.com/api/v3"
    assert settings.token_url == "https://www.strava.com/api/v3/oauth/token"


def test_oauth_settings_token_url_strips_trailing_slash() -> None:
    settings = OAuthSettings(api_base_url="https://mock.test/api/v3/")
    assert settings.token_url == "https://mock.test/api/v3/oauth/token"


def test_oauth_settings_is_frozen() -> None:
    settings = OAuthSettings(client_id="123")
    with pytest.raises(FrozenInstanceError):
        settings.client_id = "456"  # type: ignore[misc]


def test_oauth_settings_from_env() -> None:
    settings = OAuthSettings.from_env(
        {
            "STRAVA_CLIENT_ID": "123",
            "STRAVA_CLIENT_SECRET": "s3cr3t",
            "STRAVA_REDIRECT_URI": "https://app.test/callback",
            "STRAVA_API_BASE_URL": "https://mock.test/api/v3",
        }
    )
    assert settings == OAuthSettings(
        client_id="123",
        client_secret="s3cr3t",
        redirect_uri="https://app.test/callback",
        api_base_url="https://mock.test/api/v3",
    )


def test_oauth_settings_from_env_optional_values() -> None:
    settings = OAuthSettings.from_env({"STRAVA_CLIENT_ID": "123", "STRAVA_CLIENT_SECRET": "s"})
    assert settings.redirect_uri == ""
    assert settings.api_base_url == "https://www.strava.com/api/v3"


def test_oauth_settings_from_env_custom_prefix() -> None:
    settings = OAuthSettings.from_env({"APP_CLIENT_ID": "1", "APP_CLIENT_SECRET": "2"}, prefix="APP")
    assert settings.client_id == "1"
    assert settings.client_secret == "2"


@pytest.mark.parametrize(
    ("environ", "missing"),
    [
        ({"STRAVA_CLIENT_SECRET": "s"}, "STRAVA_CLIENT_ID"),
        ({"STRAVA_CLIENT_ID": "123"}, "STRAVA_CLIENT_SECRET"),
        ({"STRAVA_CLIENT_ID": "  ", "STRAVA_CLIENT_SECRET": "s"}, "STRAVA_CLIENT_ID"),
    ],
)
def test_oauth_settings_from_env_missing(environ: dict[str, str], missing: str) -> None:
    with pytest.raises(ValueError, match=f"missing required environment variable: {missing}"):
        OAuthSettings.from_env(environ)


def test_oauth_settings_from_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRAVA_CLIENT_ID", "env-id")
    monkeypatch.setenv("STRAVA_CLIENT_SECRET", "env-secret")
    monkeypatch.delenv("STRAVA_API_BASE_URL", raising=False)
    settings = OAuthSettings.from_env()
    assert settings.client_id == "env-id"
    assert settings.client_secret == "env-secret"
