r"""Call context carrying the cancellation boundary and the logger of
one logical operation."""

from __future__ import annotations

__all__ = ["CallContext"]

import logging
import threading
import time
from typing import TYPE_CHECKING

from arestrava.core.validation import validate_timeout
from arestrava.exceptions import CallCancelledError, CallTimeoutError
from arestrava.utils.structured_logging import clear_transaction_id, set_transaction_id

if TYPE_CHECKING:
    import contextvars
    from types import TracebackType
    from typing import Self


class CallContext:
    r"""Cancellation/timeout boundary and logger handle of one logical
    call.

    The deadline covers the whole logical call, retries and token
    refreshes included. Retry waits go through ``wait`` so a
    cancellation or an expired deadline interrupts them.

    Using the context as a context manager sets the transaction id for
    structured logging until the block exits.

    Args:
        timeout: Optional budget in seconds for the whole call.
        logger: The logger to use. Defaults to the ``arestrava`` logger.
        transaction_id: Optional identifier attached to structured logs.

    Example:
        ```pycon
        >>> from arestrava.context import CallContext
        >>> with CallContext(timeout=30.0, transaction_id="trx-1") as ctx:
        ...     ctx.check()
        ...
        >>> ctx = CallContext()
        >>> ctx.cancel()
        >>> ctx.cancelled
        True

        ```
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        transaction_id: str | None = None,
    ) -> None:
        validate_timeout(timeout)
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancel_event = threading.Event()
        self.logger = logger or logging.getLogger("arestrava")
        self.transaction_id = transaction_id
        self._token: contextvars.Token[str | None] | None = None

    def __enter__(self) -> Self:
        if self.transaction_id is not None:
            self._token = set_transaction_id(self.transaction_id)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            clear_transaction_id(self._token)
            self._token = None

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        """Cancel the call.

        A wait in progress returns immediately and the next check
        raises ``CallCancelledError``.
        """
        self._cancel_event.set()

    def remaining(self) -> float | None:
        """Return the seconds left before the deadline, or ``None`` if
        the context has no deadline."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def check(self) -> None:
        """Raise if the call was cancelled or its deadline has passed.

        Raises:
            CallCancelledError: If ``cancel`` was called.
            CallTimeoutError: If the deadline has passed.
        """
        if self.cancelled:
            msg = "call was cancelled"
            raise CallCancelledError(msg)
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            msg = "call deadline exceeded"
            raise CallTimeoutError(msg)

    def wait(self, seconds: float) -> None:
        """Block the calling thread for up to ``seconds``.

        Args:
            seconds: The wait in seconds.

        Raises:
            CallCancelledError: If the call is cancelled before or during
                the wait.
            CallTimeoutError: If the deadline passes before or during the
                wait.
        """
        self.check()
        remaining = self.remaining()
        timeout = seconds if remaining is None else min(seconds, remaining)
        if self._cancel_event.wait(timeout):
            msg = "call was cancelled"
            raise CallCancelledError(msg)
        self.check()
