r"""Log formatting keyed by the transaction id of the current call.

``CallContext`` stores its transaction id in a context variable while it
is entered, so every record logged during one logical call (retries and
token refreshes included) can be correlated. Two formatters read it:
``StructuredFormatter`` emits one JSON object per record and
``TransactionFormatter`` prefixes plain-text lines.

Example:
    ```python
    import logging
    from arestrava.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("arestrava")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "TransactionFormatter",
    "clear_transaction_id",
    "get_transaction_id",
    "log_structured",
    "set_transaction_id",
]

import contextvars
import json
import logging
import time
from typing import Any

_transaction_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "transaction_id", default=None
)

# Attributes every LogRecord carries; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


def get_transaction_id() -> str | None:
    """Get the transaction id of the current context.

    Returns:
        The current transaction id, or None if not set.

    Example:
        ```pycon
        >>> from arestrava.utils.structured_logging import (
        ...     clear_transaction_id,
        ...     get_transaction_id,
        ...     set_transaction_id,
        ... )
        >>> token = set_transaction_id("trx-123")
        >>> get_transaction_id()
        'trx-123'
        >>> clear_transaction_id(token)
        >>> get_transaction_id()

        ```
    """
    return _transaction_id.get()


def set_transaction_id(transaction_id: str | None) -> contextvars.Token[str | None]:
    """Set the transaction id for the current context.

    Args:
        transaction_id: The transaction id to set.

    Returns:
        A token restoring the previous value when passed to
        ``clear_transaction_id``.
    """
    return _transaction_id.set(transaction_id)


def clear_transaction_id(token: contextvars.Token[str | None] | None = None) -> None:
    """Clear the transaction id of the current context.

    Args:
        token: Optional token returned by ``set_transaction_id``. When
            given, the previous value is restored instead of clearing.
    """
    if token is not None:
        _transaction_id.reset(token)
    else:
        _transaction_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Standard fields in the JSON output are ``timestamp``, ``level``,
    ``logger``, ``message``, ``module``, ``function`` and ``line``. The
    transaction id is added when set, as well as any field passed through
    the ``extra`` argument of a logging call.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from arestrava.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("Token refreshed", extra={"subject_id": "usr-1"})
        >>> "subject_id" in stream.getvalue()
        True

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        transaction_id = get_transaction_id()
        if transaction_id is not None:
            log_data["transaction_id"] = transaction_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None  # noqa: ARG002
    ) -> str:
        """Format the record timestamp as ISO 8601 with milliseconds."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


class TransactionFormatter(logging.Formatter):
    """Plain-text formatter tagging records with the transaction id.

    While a transaction id is set a record renders as
    ``[trxid: <id>][lvl: <level>] <message>``, otherwise as the bare
    message.

    Example:
        ```pycon
        >>> import logging
        >>> from arestrava.utils.structured_logging import (
        ...     TransactionFormatter,
        ...     clear_transaction_id,
        ...     set_transaction_id,
        ... )
        >>> record = logging.makeLogRecord({"msg": "refreshing", "levelname": "INFO"})
        >>> token = set_transaction_id("trx-1")
        >>> TransactionFormatter().format(record)
        '[trxid: trx-1][lvl: info] refreshing'
        >>> clear_transaction_id(token)
        >>> TransactionFormatter().format(record)
        'refreshing'

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        transaction_id = get_transaction_id()
        if transaction_id is None:
            return message
        return f"[trxid: {transaction_id}][lvl: {record.levelname.lower()}] {message}"


def log_structured(
    logger: logging.Logger | logging.LoggerAdapter,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **extra: Additional fields included in the JSON output.
    """
    logger.log(level, message, extra=extra)
