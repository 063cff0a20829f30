r"""Retry policies for the request executor.

Public API:
    - RetryPolicy: Type of a retry predicate
    - retry_on_server_error: Default policy, retries on status >= 500
    - retry_on_status: Policy factory for an explicit set of status codes
    - retry_on_transport_error: Policy retrying network-level errors
    - never_retry: Policy that never retries
    - any_of: Combinator of policies
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

from arestrava.retry.policy import (
    RetryPolicy,
    any_of,
    never_retry,
    retry_on_server_error,
    retry_on_status,
    retry_on_transport_error,
)
