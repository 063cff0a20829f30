r"""Retry policies deciding whether an attempt should be retried.

A retry policy is a pure predicate called with ``(response, exception)``
after every attempt. Exactly one of the two arguments is ``None``: the
response is ``None`` when the transport raised, so policies must check
it before reading the status code.
"""

from __future__ import annotations

__all__ = [
    "RetryPolicy",
    "any_of",
    "never_retry",
    "retry_on_server_error",
    "retry_on_status",
    "retry_on_transport_error",
]

from typing import Callable, Optional

import httpx

RetryPolicy = Callable[[Optional[httpx.Response], Optional[Exception]], bool]


def retry_on_server_error(
    response: httpx.Response | None,
    exc: Exception | None,  # noqa: ARG001
) -> bool:
    """Retry when the server answered with a status code >= 500.

    Transport errors are not retried.

    Example:
        ```pycon
        >>> import httpx
        >>> from arestrava.retry import retry_on_server_error
        >>> retry_on_server_error(httpx.Response(503), None)
        True
        >>> retry_on_server_error(httpx.Response(404), None)
        False
        >>> retry_on_server_error(None, httpx.ConnectError("refused"))
        False

        ```
    """
    return response is not None and response.status_code >= 500


def retry_on_transport_error(
    response: httpx.Response | None,  # noqa: ARG001
    exc: Exception | None,
) -> bool:
    """Retry when the transport raised a network-level error."""
    return isinstance(exc, httpx.RequestError)


def never_retry(
    response: httpx.Response | None,  # noqa: ARG001
    exc: Exception | None,  # noqa: ARG001
) -> bool:
    """Never retry."""
    return False


def retry_on_status(*status_codes: int) -> RetryPolicy:
    """Create a policy retrying on the given status codes only.

    Args:
        *status_codes: The HTTP status codes that trigger a retry.

    Returns:
        The retry policy.

    Example:
        ```pycon
        >>> import httpx
        >>> from arestrava.retry import retry_on_status
        >>> policy = retry_on_status(429, 503)
        >>> policy(httpx.Response(429), None)
        True
        >>> policy(httpx.Response(500), None)
        False

        ```
    """
    codes = frozenset(status_codes)

    def policy(response: httpx.Response | None, exc: Exception | None) -> bool:  # noqa: ARG001
        return response is not None and response.status_code in codes

    return policy


def any_of(*policies: RetryPolicy) -> RetryPolicy:
    """Combine policies: retry when at least one of them says so.

    Example:
        ```pycon
        >>> import httpx
        >>> from arestrava.retry import any_of, retry_on_server_error, retry_on_transport_error
        >>> policy = any_of(retry_on_server_error, retry_on_transport_error)
        >>> policy(None, httpx.ReadTimeout("slow"))
        True

        ```
    """

    def policy(response: httpx.Response | None, exc: Exception | None) -> bool:
        return any(p(response, exc) for p in policies)

    return policy
