r"""Configuration dataclasses and defaults.

This module provides the default constants, the validated
``ExecutorConfig`` used by ``RequestExecutor``, and the
``OAuthSettings`` holding the OAuth application credentials.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_API_BASE_URL",
    "DEFAULT_HEADERS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_UNAUTHORIZED_RETRIES",
    "DEFAULT_RETRY_INTERVAL",
    "DEFAULT_TIMEOUT",
    "ExecutorConfig",
    "OAuthSettings",
]

import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from arestrava.core.validation import validate_executor_params
from arestrava.retry.policy import retry_on_server_error

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from arestrava.callbacks import RequestInfo, RetryInfo
    from arestrava.retry.policy import RetryPolicy


# Default timeout in seconds of the underlying httpx client
DEFAULT_TIMEOUT = 15.0

# Default maximum number of retry attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 2

# Fixed wait in seconds between two attempts (no exponential growth)
DEFAULT_RETRY_INTERVAL = 2.0

# Number of refresh-and-replay cycles per logical domain call
DEFAULT_MAX_UNAUTHORIZED_RETRIES = 1

DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}

DEFAULT_API_BASE_URL = "https://www.strava.com/api/v3"


@dataclass
class ExecutorConfig:
    """Configuration of the retry behavior of a ``RequestExecutor``.

    Args:
        max_retries: Maximum number of retry attempts. Must be >= 0.
        retry_interval: Fixed wait in seconds between two attempts.
            Must be >= 0.
        retry_policy: Predicate called with ``(response, exception)``
            after each attempt, returning ``True`` to retry.
        headers: Static headers sent with every request.
        on_request: Optional callback called before each attempt.
        on_retry: Optional callback called when an attempt is retried.

    Example:
        ```pycon
        >>> from arestrava.core.config import ExecutorConfig
        >>> config = ExecutorConfig()
        >>> config.max_retries
        2
        >>> config.retry_interval
        2.0
        >>> merged = config.merge(max_retries=5)
        >>> merged.max_retries
        5
        >>> config.max_retries
        2

        ```
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    retry_policy: RetryPolicy = retry_on_server_error
    headers: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))
    on_request: Callable[[RequestInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None

    def __post_init__(self) -> None:
        validate_executor_params(
            max_retries=self.max_retries, retry_interval=self.retry_interval
        )

    def merge(self, **overrides: Any) -> ExecutorConfig:
        """Create a new config with the specified parameters
        overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ``ExecutorConfig`` instance.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


@dataclass(frozen=True)
class OAuthSettings:
    """Credentials and endpoints of an OAuth application.

    Args:
        client_id: The OAuth client identifier.
        client_secret: The OAuth client secret.
        redirect_uri: The URI the user is redirected to after
            authorization.
        api_base_url: The base URL of the API. The token endpoint is
            ``{api_base_url}/oauth/token``.
    """

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    api_base_url: str = DEFAULT_API_BASE_URL

    @property
    def token_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/oauth/token"

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, prefix: str = "STRAVA"
    ) -> OAuthSettings:
        """Read the settings from environment variables.

        ``{prefix}_CLIENT_ID`` and ``{prefix}_CLIENT_SECRET`` are
        required, ``{prefix}_REDIRECT_URI`` and ``{prefix}_API_BASE_URL``
        are optional.

        Args:
            environ: The environment to read. Defaults to ``os.environ``.
            prefix: The prefix of the variable names.

        Returns:
            The settings.

        Raises:
            ValueError: If a required variable is missing or blank.

        Example:
            ```pycon
            >>> from arestrava.core.config import OAuthSettings
            >>> settings = OAuthSettings.from_env(
            ...     {"STRAVA_CLIENT_ID": "123", "STRAVA_CLIENT_SECRET": "s3cr3t"}
            ... )
            >>> settings.client_id
            '123'
            >>> settings.token_url
            'https://www.strava.com/api/v3/oauth/token'

            ```
        """
        env = os.environ if environ is None else environ
        values = {}
        for suffix in ("CLIENT_ID", "CLIENT_SECRET"):
            name = f"{prefix}_{suffix}"
            value = env.get(name, "").strip()
            if not value:
                msg = f"missing required environment variable: {name}"
                raise ValueError(msg)
            values[suffix] = value
        return cls(
            client_id=values["CLIENT_ID"],
            client_secret=values["CLIENT_SECRET"],
            redirect_uri=env.get(f"{prefix}_REDIRECT_URI", ""),
            api_base_url=env.get(f"{prefix}_API_BASE_URL") or DEFAULT_API_BASE_URL,
        )
