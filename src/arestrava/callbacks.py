r"""Hooks observing the attempts of a request plan.

``ExecutorConfig`` accepts two optional hooks:

- on_request: receives a ``RequestInfo`` right before each transport send
- on_retry: receives a ``RetryInfo`` once an attempt was judged retryable,
  before the wait

Hooks run synchronously inside the retry loop, so a hook that blocks
delays the next attempt.

Example:
    ```pycon
    >>> from arestrava.callbacks import RetryInfo
    >>> from arestrava.core import ExecutorConfig
    >>> def report(info: RetryInfo) -> None:
    ...     if info.exhausted:
    ...         print(f"giving up on {info.url}")
    ...
    >>> config = ExecutorConfig(on_retry=report)

    ```
"""

from __future__ import annotations

__all__ = ["RequestInfo", "RetryInfo", "notify"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

InfoT = TypeVar("InfoT")


@dataclass(frozen=True)
class RequestInfo:
    """Snapshot passed to ``on_request``.

    Attributes:
        method: The HTTP method of the plan.
        url: The full URL, query string included.
        attempt: The attempt about to be sent, starting at 1.
        max_attempts: The attempts allowed by the plan, i.e.
            ``max_retries + 1``.
    """

    method: str
    url: str
    attempt: int
    max_attempts: int


@dataclass(frozen=True)
class RetryInfo:
    """Snapshot passed to ``on_retry``.

    Attributes:
        method: The HTTP method of the plan.
        url: The full URL, query string included.
        attempt: The attempt that was judged retryable, starting at 1.
        max_attempts: The attempts allowed by the plan.
        wait_time: Seconds the plan waits before the next attempt, 0 when
            no attempt follows.
        status_code: The status of the retryable response, or ``None``
            when the transport raised.
        error: The transport error, or ``None`` when a response came back.
    """

    method: str
    url: str
    attempt: int
    max_attempts: int
    wait_time: float
    status_code: int | None = None
    error: Exception | None = None

    @property
    def exhausted(self) -> bool:
        """``True`` when this was the last allowed attempt."""
        return self.attempt >= self.max_attempts


def notify(hook: Callable[[InfoT], None] | None, info: InfoT) -> None:
    """Call the hook with the info if a hook is set.

    Args:
        hook: The optional hook.
        info: The snapshot passed to the hook.
    """
    if hook is not None:
        hook(info)
