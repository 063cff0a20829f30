r"""Parameter validation utilities for request execution.

This module provides validation functions for the executor and token
lifecycle parameters to ensure they meet the required constraints
before being used.
"""

from __future__ import annotations

__all__ = ["validate_executor_params", "validate_timeout", "validate_unauthorized_retries"]


def validate_timeout(timeout: float | None) -> None:
    """Validate a timeout parameter.

    Args:
        timeout: Maximum seconds allowed. ``None`` means no limit.

    Raises:
        ValueError: If timeout is not ``None`` and is <= 0.

    Example:
        ```pycon
        >>> from arestrava.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(None)

        ```
    """
    if timeout is not None and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_executor_params(max_retries: int, retry_interval: float) -> None:
    """Validate the retry parameters of a request executor.

    Args:
        max_retries: Maximum number of retry attempts. Must be >= 0.
            A value of 0 means only the initial attempt is made.
        retry_interval: Fixed wait in seconds between two attempts.
            Must be >= 0.

    Raises:
        ValueError: If max_retries or retry_interval are negative.

    Example:
        ```pycon
        >>> from arestrava.core.validation import validate_executor_params
        >>> validate_executor_params(max_retries=2, retry_interval=2.0)
        >>> validate_executor_params(max_retries=-1, retry_interval=2.0)  # doctest: +SKIP

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if retry_interval < 0:
        msg = f"retry_interval must be >= 0, got {retry_interval}"
        raise ValueError(msg)


def validate_unauthorized_retries(max_unauthorized_retries: int) -> None:
    """Validate the unauthorized retry budget of a token lifecycle
    client.

    Args:
        max_unauthorized_retries: Number of refresh-and-replay cycles
            allowed per logical call. Must be >= 0.

    Raises:
        ValueError: If max_unauthorized_retries is negative.
    """
    if max_unauthorized_retries < 0:
        msg = f"max_unauthorized_retries must be >= 0, got {max_unauthorized_retries}"
        raise ValueError(msg)
