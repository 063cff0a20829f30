r"""Retrying request executor.

``RequestExecutor`` turns an HTTP call plus a retry policy into a decoded
result or a typed failure. ``RequestExecutor.prepare`` builds a
``RequestPlan``: an immutable description of one logical call that can be
executed exactly once.
"""

from __future__ import annotations

__all__ = ["RequestExecutor", "RequestPlan"]

import json
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from arestrava.callbacks import RequestInfo, RetryInfo, notify
from arestrava.core.config import ExecutorConfig
from arestrava.exceptions import (
    BadStatusError,
    DecodeError,
    PlanConsumedError,
    RetriesExhaustedError,
)
from arestrava.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arestrava.containers import Container
    from arestrava.context import CallContext
    from arestrava.transport import Transport

logger: logging.Logger = logging.getLogger(__name__)


class RequestPlan:
    r"""Single-use execution plan of one logical HTTP call.

    Plans are created by ``RequestExecutor.prepare``. The attempt counter
    belongs to the plan, so two plans never share retry state.

    Args:
        transport: The transport used to send the request.
        config: The retry configuration.
        request: The request sent on every attempt.
        result: Optional container receiving the decoded success body.
        reason: Optional container receiving the decoded error body.
    """

    def __init__(
        self,
        transport: Transport,
        config: ExecutorConfig,
        request: httpx.Request,
        result: Container[Any] | None = None,
        reason: Container[Any] | None = None,
    ) -> None:
        self._transport = transport
        self._config = config
        self._request = request
        self._result = result
        self._reason = reason
        self._attempts = 0
        self._consumed = False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self.method!r}, url={self.url!r}, "
            f"consumed={self._consumed})"
        )

    @property
    def method(self) -> str:
        return self._request.method

    @property
    def url(self) -> str:
        return str(self._request.url)

    @property
    def request(self) -> httpx.Request:
        return self._request

    @property
    def attempts(self) -> int:
        r"""The number of transport sends made by ``execute``."""
        return self._attempts

    @property
    def consumed(self) -> bool:
        return self._consumed

    def execute(self, context: CallContext | None = None) -> Any:
        r"""Run the request through the bounded retry loop.

        Every attempt sends the request and asks the retry policy about
        the outcome. A retryable outcome consumes one retry and, when
        budget remains, blocks for the fixed retry interval. The first
        non-retryable outcome ends the loop:

        - a transport error is re-raised as-is;
        - a status >= 400 decodes the body into the reason container
          (decode failures are ignored) and raises ``BadStatusError``;
        - anything else decodes the body into the result container.

        Args:
            context: Optional call context. It bounds the whole call and
                makes the retry waits interruptible. Without a context the
                waits use ``time.sleep``.

        Returns:
            The decoded success payload, as stored in the result container
            when one is attached.

        Raises:
            PlanConsumedError: If the plan was already executed.
            httpx.RequestError: If the transport failed and the policy did
                not retry it.
            BadStatusError: If the final response has a status >= 400.
            DecodeError: If the success body cannot be decoded.
            RetriesExhaustedError: If every allowed attempt was retryable.
            CallTimeoutError: If the context deadline passed.
            CallCancelledError: If the context was cancelled.
        """
        if self._consumed:
            msg = f"{self.method} request plan to {self.url} was already executed"
            raise PlanConsumedError(msg)
        self._consumed = True

        config = self._config
        log = context.logger if context is not None else logger
        method, url = self.method, self.url
        last_error: Exception | None = None
        last_status_code: int | None = None

        max_attempts = config.max_retries + 1
        self._attempts = 0
        while self._attempts < max_attempts:
            if context is not None:
                context.check()
            notify(
                config.on_request,
                RequestInfo(
                    method=method, url=url, attempt=self._attempts + 1, max_attempts=max_attempts
                ),
            )

            response: httpx.Response | None = None
            error: Exception | None = None
            self._attempts += 1
            try:
                response = self._transport.send(self._request)
            except httpx.RequestError as exc:
                error = exc

            if config.retry_policy(response, error):
                last_error = error
                last_status_code = response.status_code if response is not None else None
                wait_time = config.retry_interval if self._attempts < max_attempts else 0.0
                log_structured(
                    log,
                    logging.DEBUG,
                    f"{method} request to {url} is retryable "
                    f"(attempt {self._attempts}/{max_attempts})",
                    attempt=self._attempts,
                    status_code=last_status_code,
                    error=type(error).__name__ if error is not None else None,
                )
                notify(
                    config.on_retry,
                    RetryInfo(
                        method=method,
                        url=url,
                        attempt=self._attempts,
                        max_attempts=max_attempts,
                        wait_time=wait_time,
                        status_code=last_status_code,
                        error=error,
                    ),
                )
                if wait_time > 0:
                    self._wait(wait_time, context)
                continue

            if error is not None:
                log.debug(f"{method} request to {url} failed with {type(error).__name__}: {error}")
                raise error
            return self._handle_response(response, log)

        log.debug(f"{method} request to {url} failed after {self._attempts} attempts")
        raise RetriesExhaustedError(
            attempts=self._attempts, status_code=last_status_code
        ) from last_error

    def _wait(self, seconds: float, context: CallContext | None) -> None:
        if context is not None:
            context.wait(seconds)
        else:
            time.sleep(seconds)

    def _handle_response(
        self, response: httpx.Response, log: logging.Logger | logging.LoggerAdapter
    ) -> Any:
        body = response.read()
        if response.status_code >= 400:
            if self._reason is not None:
                try:
                    self._reason.decode(json.loads(body))
                except (KeyError, TypeError, ValueError):
                    log.debug(
                        f"unable to decode error body of {self.method} request to {self.url}"
                    )
            raise BadStatusError(response.status_code)

        try:
            payload = json.loads(body) if body else None
            if self._result is not None:
                return self._result.decode(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(status_code=response.status_code, body=body) from exc
        return payload


class RequestExecutor:
    r"""Builds and runs HTTP calls with a bounded retry loop.

    The executor holds the transport and the retry configuration. It
    keeps no per-call state: each call goes through a fresh
    ``RequestPlan``.

    Args:
        transport: The transport used to send requests, for example an
            ``httpx.Client``.
        config: Optional retry configuration. Defaults to
            ``ExecutorConfig()`` (2 retries, 2 seconds apart, retry on
            status >= 500).

    Example:
        ```pycon
        >>> import httpx
        >>> from arestrava.containers import Container
        >>> from arestrava.request import RequestExecutor
        >>> executor = RequestExecutor(transport=httpx.Client())
        >>> result, reason = Container(), Container()
        >>> plan = executor.prepare(
        ...     "GET", "https://api.example.com/data", result=result, reason=reason
        ... )
        >>> plan.execute()  # doctest: +SKIP

        ```
    """

    def __init__(self, transport: Transport, config: ExecutorConfig | None = None) -> None:
        self._transport = transport
        self._config = config or ExecutorConfig()

    @property
    def config(self) -> ExecutorConfig:
        return self._config

    def prepare(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        result: Container[Any] | None = None,
        reason: Container[Any] | None = None,
    ) -> RequestPlan:
        r"""Build the execution plan of one HTTP call.

        Args:
            method: The HTTP method (e.g., "GET", "POST").
            url: The URL to send the request to.
            params: Optional query parameters, URL-encoded.
            body: Optional object serialized to JSON. A POST without body
                sends ``{}``.
            headers: Optional headers merged over the executor headers.
            result: Optional container receiving the decoded success body.
            reason: Optional container receiving the decoded error body.

        Returns:
            The plan, ready to be executed once.
        """
        method = method.upper()
        if body is None and method == "POST":
            body = {}
        merged_headers = {**self._config.headers, **(headers or {})}
        content = json.dumps(body).encode() if body is not None else None
        request = httpx.Request(
            method, url, params=params, headers=merged_headers, content=content
        )
        return RequestPlan(
            transport=self._transport,
            config=self._config,
            request=request,
            result=result,
            reason=reason,
        )

    def request(
        self, method: str, url: str, *, context: CallContext | None = None, **kwargs: Any
    ) -> Any:
        r"""Prepare and execute an HTTP call.

        Args:
            method: The HTTP method.
            url: The URL to send the request to.
            context: Optional call context.
            **kwargs: Additional keyword arguments (see ``prepare``).

        Returns:
            The decoded success payload.
        """
        return self.prepare(method, url, **kwargs).execute(context)

    def get(self, url: str, **kwargs: Any) -> Any:
        r"""Prepare and execute a GET call (see ``request``)."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Any:
        r"""Prepare and execute a POST call (see ``request``)."""
        return self.request("POST", url, **kwargs)
