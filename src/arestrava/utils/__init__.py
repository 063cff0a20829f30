r"""Utility functions shared across the package."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "TransactionFormatter",
    "clear_transaction_id",
    "get_transaction_id",
    "log_structured",
    "set_transaction_id",
]

from arestrava.utils.structured_logging import (
    StructuredFormatter,
    TransactionFormatter,
    clear_transaction_id,
    get_transaction_id,
    log_structured,
    set_transaction_id,
)
