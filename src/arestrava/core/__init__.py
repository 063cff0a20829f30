r"""Core configuration and validation shared by the executor and the
token lifecycle client."""

from __future__ import annotations

__all__ = [
    "DEFAULT_HEADERS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_UNAUTHORIZED_RETRIES",
    "DEFAULT_RETRY_INTERVAL",
    "DEFAULT_TIMEOUT",
    "ExecutorConfig",
    "OAuthSettings",
    "validate_executor_params",
    "validate_timeout",
    "validate_unauthorized_retries",
]

from arestrava.core.config import (
    DEFAULT_HEADERS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_UNAUTHORIZED_RETRIES,
    DEFAULT_RETRY_INTERVAL,
    DEFAULT_TIMEOUT,
    ExecutorConfig,
    OAuthSettings,
)
from arestrava.core.validation import (
    validate_executor_params,
    validate_timeout,
    validate_unauthorized_retries,
)
