r"""arestrava - Retrying request executor and token-lifecycle-aware API
client.

This package turns HTTP calls into decoded results or typed failures
through a bounded retry loop, and builds on it an OAuth client that
refreshes expired or rejected access tokens and replays the call.

Example:
    ```pycon
    >>> import httpx
    >>> from arestrava import CallContext, OAuthSettings, StravaClient, Tokens
    >>> from arestrava.storage import InMemoryDocumentStore
    >>> from arestrava.tokens import DocumentTokenManager
    >>> with httpx.Client() as transport:  # doctest: +SKIP
    ...     client = StravaClient(
    ...         "usr-1",
    ...         Tokens("access", "refresh", 1700000000),
    ...         DocumentTokenManager(InMemoryDocumentStore()),
    ...         OAuthSettings.from_env(),
    ...         transport=transport,
    ...     )
    ...     with CallContext(timeout=60.0) as ctx:
    ...         activities = client.list_activities(ctx)
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "BadStatusError",
    "CallContext",
    "Container",
    "ExecutorConfig",
    "OAuthSettings",
    "RequestExecutor",
    "RequestPlan",
    "RetriesExhaustedError",
    "StravaClient",
    "TokenLifecycleClient",
    "TokenRefreshError",
    "Tokens",
    "UnauthorizedError",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from arestrava.containers import Container
from arestrava.context import CallContext
from arestrava.core.config import ExecutorConfig, OAuthSettings
from arestrava.exceptions import (
    BadStatusError,
    RetriesExhaustedError,
    TokenRefreshError,
    UnauthorizedError,
)
from arestrava.oauth import TokenLifecycleClient
from arestrava.request import RequestExecutor, RequestPlan
from arestrava.strava import StravaClient
from arestrava.tokens import Tokens

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
