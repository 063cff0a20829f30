r"""Transport capability consumed by the request executor.

A transport sends one request and returns one response, or raises an
``httpx.RequestError`` subclass on network failure. ``httpx.Client``
satisfies the protocol, and so does ``arestrava.testing.ScriptedTransport``.
There is no process-wide default transport: callers create one and pass
it to the executor explicitly.
"""

from __future__ import annotations

__all__ = ["Transport", "create_transport"]

from typing import Any, Protocol, runtime_checkable

import httpx

from arestrava.core.config import DEFAULT_TIMEOUT
from arestrava.core.validation import validate_timeout


@runtime_checkable
class Transport(Protocol):
    """Anything that can send one ``httpx.Request``."""

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send the request and return the response.

        Raises:
            httpx.RequestError: On network-level failures.
        """


def create_transport(timeout: float = DEFAULT_TIMEOUT, **kwargs: Any) -> httpx.Client:
    r"""Create an ``httpx.Client`` to use as transport.

    The caller owns the client and is responsible for closing it.

    Args:
        timeout: Timeout in seconds of each network operation.
        **kwargs: Additional keyword arguments passed to ``httpx.Client``.

    Returns:
        The client.

    Example:
        ```pycon
        >>> from arestrava.transport import Transport, create_transport
        >>> with create_transport(timeout=5.0) as client:
        ...     isinstance(client, Transport)
        ...
        True

        ```
    """
    validate_timeout(timeout)
    return httpx.Client(timeout=timeout, **kwargs)
