r"""Token-lifecycle-aware API client.

``TokenLifecycleClient`` wraps a ``RequestExecutor`` with the knowledge
of OAuth tokens: it refreshes an expired access token before a domain
call, and refreshes and replays a domain call rejected with a 401, within
a bounded budget.

Refresh failures are handled differently at the two refresh sites:

- before the domain call (expired token), the failure is logged and the
  stale token is still tried;
- after a rejected domain call, the failure aborts the loop and the
  ``TokenRefreshError`` reaches the caller.
"""

from __future__ import annotations

__all__ = ["TokenLifecycleClient"]

import logging
import time
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from arestrava.containers import Container
from arestrava.core.config import DEFAULT_MAX_UNAUTHORIZED_RETRIES, ExecutorConfig
from arestrava.core.validation import validate_unauthorized_retries
from arestrava.exceptions import (
    BadStatusError,
    DecodeError,
    RetriesExhaustedError,
    TokenRefreshError,
    UnauthorizedError,
)
from arestrava.request import RequestExecutor
from arestrava.tokens import Tokens

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from arestrava.context import CallContext
    from arestrava.core.config import OAuthSettings
    from arestrava.tokens import TokenManager
    from arestrava.transport import Transport

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")


class TokenLifecycleClient:
    r"""API client refreshing its OAuth tokens transparently.

    The client holds the current token snapshot as mutable state and
    replaces it wholesale after each successful refresh. It is not safe
    to share an instance between concurrent callers.

    Args:
        subject_id: Identifier of the user owning the tokens, passed to
            the token manager.
        tokens: The initial token snapshot.
        token_manager: Persists refreshed snapshots.
        settings: The OAuth application credentials and endpoints.
        transport: The transport used by the executor.
        config: Optional executor configuration.
        max_unauthorized_retries: Number of refresh-and-replay cycles
            allowed per logical call. Must be >= 0.
    """

    def __init__(
        self,
        subject_id: str,
        tokens: Tokens,
        token_manager: TokenManager,
        settings: OAuthSettings,
        *,
        transport: Transport,
        config: ExecutorConfig | None = None,
        max_unauthorized_retries: int = DEFAULT_MAX_UNAUTHORIZED_RETRIES,
    ) -> None:
        validate_unauthorized_retries(max_unauthorized_retries)
        self._subject_id = subject_id
        self._tokens = tokens
        self._token_manager = token_manager
        self._settings = settings
        self._executor = RequestExecutor(transport=transport, config=config or ExecutorConfig())
        self._max_unauthorized_retries = max_unauthorized_retries

    @property
    def subject_id(self) -> str:
        return self._subject_id

    @property
    def tokens(self) -> Tokens:
        return self._tokens

    @property
    def settings(self) -> OAuthSettings:
        return self._settings

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def check_expiry(self, context: CallContext) -> bool:
        r"""Refresh the access token if it has expired.

        A refresh failure is logged and swallowed: the caller goes on
        with the stale token.

        Args:
            context: The call context.

        Returns:
            ``True`` if the token had expired, otherwise ``False``.
        """
        if not self._tokens.is_expired():
            return False
        expires_at = self._tokens.expires_at
        context.logger.info(
            f"detected expired access token [expired_at: {expires_at}] "
            f"[time_since: {time.time() - expires_at:.0f}s], refreshing..."
        )
        try:
            self.refresh_access_token(context)
        except TokenRefreshError as exc:
            context.logger.error(f"unable to refresh access token: {exc}")
        return True

    def refresh_access_token(self, context: CallContext) -> Tokens:
        r"""Exchange the refresh token for a new token snapshot.

        On success the in-memory snapshot is replaced, then the token
        manager is asked to persist it. A persistence failure is logged
        and does not fail the refresh.

        Args:
            context: The call context.

        Returns:
            The new token snapshot.

        Raises:
            TokenRefreshError: If the refresh call failed. The in-memory
                snapshot is left unchanged.
        """
        reason: Container[Any] = Container()
        params = {
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "grant_type": "refresh_token",
            "refresh_token": self._tokens.refresh_token,
        }
        try:
            tokens = self._executor.post(
                self._settings.token_url,
                context=context,
                params=params,
                result=Container(Tokens.from_payload),
                reason=reason,
            )
        except BadStatusError as exc:
            msg = (
                f"unable to refresh access token due to bad status code "
                f"({exc.status_code}): {reason.value}"
            )
            context.logger.error(msg)
            raise TokenRefreshError(msg, status_code=exc.status_code, reason=reason.value) from exc
        except (httpx.RequestError, RetriesExhaustedError, DecodeError) as exc:
            msg = f"unable to refresh access token: {exc}"
            context.logger.error(msg)
            raise TokenRefreshError(msg, status_code=getattr(exc, "status_code", None)) from exc

        self._tokens = tokens
        try:
            self._token_manager.persist(context, self._subject_id, tokens)
        except Exception as exc:  # noqa: BLE001
            context.logger.warning(f"unable to update access tokens of {self._subject_id}: {exc}")
        return tokens

    def call_with_refresh(
        self,
        context: CallContext,
        operation: Callable[[CallContext], T],
        *,
        reason: Container[Any] | None = None,
    ) -> T:
        r"""Run a domain operation within the token lifecycle.

        The expiry check runs first. The operation is then attempted; each
        ``UnauthorizedError`` triggers a refresh and a new attempt until
        the unauthorized retry budget is spent, after which the
        ``UnauthorizedError`` is re-raised. Any other outcome ends the
        call immediately.

        Args:
            context: The call context.
            operation: The domain call. It must read the access token
                from ``self.tokens`` at each invocation.
            reason: Optional container receiving the body of the 401
                response when the budget is spent. Rejections that were
                followed by a refresh leave it untouched.

        Returns:
            The result of the operation.

        Raises:
            UnauthorizedError: If the token was still rejected after the
                budget was spent.
            TokenRefreshError: If a refresh triggered by a rejection
                failed.
        """
        self.check_expiry(context)
        attempts = 0
        while True:
            try:
                return operation(context)
            except UnauthorizedError as exc:
                if attempts >= self._max_unauthorized_retries:
                    context.logger.error(
                        f"access token still rejected after {attempts + 1} attempts"
                    )
                    if reason is not None and exc.reason is not None:
                        reason.fill(exc.reason)
                    raise
            attempts += 1
            context.logger.info(
                f"access token rejected, refreshing "
                f"(attempt {attempts}/{self._max_unauthorized_retries})"
            )
            self.refresh_access_token(context)

    def authorized_request(
        self,
        context: CallContext,
        method: str,
        url: str,
        *,
        description: str,
        params: Mapping[str, Any] | None = None,
        result: Container[Any] | None = None,
        reason: Container[Any] | None = None,
    ) -> Any:
        r"""Send one domain request carrying the current access token.

        A 401 answer is mapped to ``UnauthorizedError``; every other
        failure propagates unchanged after being logged.

        Args:
            context: The call context.
            method: The HTTP method.
            url: The URL of the domain endpoint.
            description: Short description of the call for log messages,
                for example "list activities".
            params: Optional query parameters.
            result: Optional container receiving the decoded success body.
            reason: Optional container receiving the decoded error body.
                Each send decodes into a fresh copy; the caller's
                container is only filled for an error that is raised as
                ``BadStatusError``. The body of a 401 travels on the
                ``UnauthorizedError`` instead.

        Returns:
            The decoded success payload.

        Raises:
            UnauthorizedError: If the service rejected the access token.
            BadStatusError: For any other status code >= 400.
        """
        attempt_reason = reason.empty_copy() if reason is not None else Container()
        headers = {"Authorization": f"Bearer {self._tokens.access_token}"}
        try:
            return self._executor.request(
                method,
                url,
                context=context,
                params=params,
                headers=headers,
                result=result,
                reason=attempt_reason,
            )
        except BadStatusError as exc:
            if exc.status_code == httpx.codes.UNAUTHORIZED:
                context.logger.debug("returning unauthorized error to trigger refresh loop")
                raise UnauthorizedError(reason=attempt_reason.value) from exc
            context.logger.error(
                f"unable to {description} due to bad status code ({exc.status_code}): "
                f"{attempt_reason.value}"
            )
            if reason is not None and attempt_reason.filled:
                reason.fill(attempt_reason.value)
            raise
        except (httpx.RequestError, RetriesExhaustedError, DecodeError) as exc:
            context.logger.error(f"unable to {description}: {exc}")
            raise

    def exchange_code(
        self,
        code: str,
        *,
        context: CallContext | None = None,
        result: Container[Any] | None = None,
        reason: Container[Any] | None = None,
    ) -> Any:
        r"""Exchange an authorization code for tokens.

        This is a one-shot call: there is no token to refresh yet, so no
        unauthorized retry happens. Server errors are still retried by
        the executor.

        Args:
            code: The authorization code received on the redirect URI.
            context: Optional call context.
            result: Optional container receiving the decoded payload.
            reason: Optional container receiving the decoded error body.

        Returns:
            The decoded token payload.

        Raises:
            BadStatusError: If the token endpoint answered with a status
                >= 400.
        """
        log = context.logger if context is not None else logger
        reason = reason if reason is not None else Container()
        params = {
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
            "code": code,
            "grant_type": "authorization_code",
        }
        try:
            return self._executor.post(
                self._settings.token_url,
                context=context,
                params=params,
                result=result,
                reason=reason,
            )
        except BadStatusError as exc:
            log.error(
                f"unable to get auth tokens due to bad status code ({exc.status_code}): "
                f"{reason.value}"
            )
            raise
        except (httpx.RequestError, RetriesExhaustedError, DecodeError) as exc:
            log.error(f"unable to retrieve tokens: {exc}")
            raise
