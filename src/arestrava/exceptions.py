r"""Exception hierarchy for request execution and token lifecycle
errors.

Transport-level failures (DNS, connection refused, timeouts) are not
wrapped: they surface as the underlying ``httpx.RequestError``. Everything
else raised by this package derives from ``ArestravaError``.
"""

from __future__ import annotations

__all__ = [
    "ArestravaError",
    "BadStatusError",
    "CallCancelledError",
    "CallTimeoutError",
    "DecodeError",
    "DocumentCollisionError",
    "DocumentFieldError",
    "PlanConsumedError",
    "RetriesExhaustedError",
    "TokenRefreshError",
    "UnauthorizedError",
]

from typing import Any


class ArestravaError(Exception):
    """Base class of all the errors raised by this package."""


class BadStatusError(ArestravaError):
    """Raised when the server answers with a status code >= 400 that
    the retry policy did not retry.

    The error carries no body. The decoded error payload is delivered
    into the reason container attached to the request instead.

    Args:
        status_code: The HTTP status code of the response.

    Example:
        ```pycon
        >>> from arestrava.exceptions import BadStatusError
        >>> err = BadStatusError(404)
        >>> err.status_code
        404
        >>> str(err)
        'bad status code: 404'

        ```
    """

    def __init__(self, status_code: int) -> None:
        super().__init__(f"bad status code: {status_code}")
        self.status_code = status_code


class RetriesExhaustedError(ArestravaError):
    """Raised when every attempt allowed by the retry budget was
    retryable.

    Args:
        attempts: The number of transport sends that were made.
        status_code: The status code of the last response, if any.
    """

    def __init__(self, attempts: int, status_code: int | None = None) -> None:
        super().__init__("max retries exhausted")
        self.attempts = attempts
        self.status_code = status_code


class UnauthorizedError(ArestravaError):
    """Raised by domain calls when the service rejected the access
    token.

    The transport succeeded but the response was a 401. Only the domain
    layer raises it, so other 4xx codes never reach the refresh loop.

    Args:
        reason: The decoded error body of the 401 response, if any.
    """

    status_code = 401

    def __init__(self, reason: Any = None) -> None:
        super().__init__("invalid tokens")
        self.reason = reason


class TokenRefreshError(ArestravaError):
    """Raised when refreshing the access token failed.

    Args:
        message: A descriptive error message.
        status_code: The status code of the refresh response, if the
            server answered.
        reason: The decoded error body of the refresh response, if any.
    """

    def __init__(
        self, message: str, status_code: int | None = None, reason: Any = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class DecodeError(ArestravaError):
    """Raised when a successful response body cannot be decoded into the
    result container.

    Args:
        status_code: The status code of the response.
        body: The raw response body.
    """

    def __init__(self, status_code: int, body: bytes) -> None:
        super().__init__(f"unable to decode response body (status {status_code})")
        self.status_code = status_code
        self.body = body


class PlanConsumedError(ArestravaError):
    """Raised when a request plan is executed more than once."""


class CallTimeoutError(ArestravaError):
    """Raised when the deadline of a call context has passed."""


class CallCancelledError(ArestravaError):
    """Raised when a call context was cancelled."""


class DocumentFieldError(ArestravaError, ValueError):
    """Raised when a required document field is absent or has the
    wrong type.

    Args:
        key: The name of the field.
        expected: The name of the expected type.
    """

    def __init__(self, key: str, expected: str) -> None:
        super().__init__(f"document field '{key}' is missing or is not a {expected}")
        self.key = key
        self.expected = expected


class DocumentCollisionError(ArestravaError):
    """Raised when inserting a document whose ``_id`` is already taken.

    Args:
        collection: The name of the collection.
    """

    def __init__(self, collection: str) -> None:
        super().__init__(f"collision inserting into {collection}")
        self.collection = collection
