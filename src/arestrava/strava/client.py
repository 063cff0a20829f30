r"""Strava API client with transparent token refresh."""

from __future__ import annotations

__all__ = ["StravaClient"]

from typing import TYPE_CHECKING, Any

from arestrava.containers import Container
from arestrava.oauth.lifecycle import TokenLifecycleClient
from arestrava.strava.auth import Platform, build_authorization_url
from arestrava.strava.models import Activity, TokenResponse, parse_summary_activities

if TYPE_CHECKING:
    from arestrava.context import CallContext
    from arestrava.strava.models import SummaryActivity


class StravaClient(TokenLifecycleClient):
    r"""Client listing and retrieving the activities of one athlete.

    Domain calls run through ``call_with_refresh``: an expired token is
    refreshed first, and a rejected token is refreshed and the call
    replayed once by default.

    Example:
        ```pycon
        >>> import httpx
        >>> from arestrava.context import CallContext
        >>> from arestrava.core import OAuthSettings
        >>> from arestrava.storage import InMemoryDocumentStore
        >>> from arestrava.strava import StravaClient
        >>> from arestrava.tokens import DocumentTokenManager, Tokens
        >>> client = StravaClient(
        ...     "usr-1",
        ...     Tokens("access", "refresh", 1700000000),
        ...     DocumentTokenManager(InMemoryDocumentStore()),
        ...     OAuthSettings(client_id="123", client_secret="s3cr3t"),
        ...     transport=httpx.Client(),
        ... )
        >>> with CallContext(timeout=60.0) as ctx:  # doctest: +SKIP
        ...     activities = client.list_activities(ctx, per_page=10)
        ...

        ```
    """

    def authorization_url(self, scope: str, platform: Platform = Platform.WEB) -> str:
        """Return the URL redirecting the user to the consent page.

        Args:
            scope: Comma-separated list of requested scopes.
            platform: The platform whose authorization endpoint is used.
        """
        return build_authorization_url(
            client_id=self.settings.client_id,
            redirect_uri=self.settings.redirect_uri,
            scope=scope,
            platform=platform,
        )

    def generate_tokens(
        self,
        code: str,
        *,
        context: CallContext | None = None,
        reason: Container[Any] | None = None,
    ) -> TokenResponse:
        r"""Exchange the code Strava appended to the redirect URI for
        tokens.

        Args:
            code: The authorization code.
            context: Optional call context.
            reason: Optional container receiving the decoded error body.

        Returns:
            The token response, athlete profile included.

        Raises:
            BadStatusError: If Strava rejected the code.
        """
        return self.exchange_code(
            code, context=context, result=Container(TokenResponse.from_dict), reason=reason
        )

    def list_activities(
        self,
        context: CallContext,
        *,
        before: int | None = None,
        after: int | None = None,
        page: int | None = None,
        per_page: int | None = None,
        reason: Container[Any] | None = None,
    ) -> list[SummaryActivity]:
        r"""List the activities of the athlete.

        Args:
            context: The call context.
            before: Optional epoch timestamp; only earlier activities.
            after: Optional epoch timestamp; only later activities.
            page: Optional page number.
            per_page: Optional number of items per page.
            reason: Optional container receiving the decoded error body.

        Returns:
            The activities.

        Raises:
            UnauthorizedError: If the token was still rejected after the
                refresh budget was spent.
            BadStatusError: For any other status code >= 400.
        """
        params = {
            key: value
            for key, value in (
                ("before", before),
                ("after", after),
                ("page", page),
                ("per_page", per_page),
            )
            if value is not None
        }

        def operation(ctx: CallContext) -> list[SummaryActivity]:
            return self.authorized_request(
                ctx,
                "GET",
                f"{self.settings.api_base_url}/athlete/activities",
                description="list strava activities",
                params=params or None,
                result=Container(parse_summary_activities),
                reason=reason,
            )

        return self.call_with_refresh(context, operation, reason=reason)

    def get_activity(
        self,
        context: CallContext,
        activity_id: int,
        *,
        reason: Container[Any] | None = None,
    ) -> Activity:
        r"""Retrieve one activity of the athlete.

        Args:
            context: The call context.
            activity_id: The identifier of the activity.
            reason: Optional container receiving the decoded error body.

        Returns:
            The activity.

        Raises:
            UnauthorizedError: If the token was still rejected after the
                refresh budget was spent.
            BadStatusError: For any other status code >= 400, for
                example 404 for an unknown activity.
        """

        def operation(ctx: CallContext) -> Activity:
            return self.authorized_request(
                ctx,
                "GET",
                f"{self.settings.api_base_url}/activities/{activity_id}",
                description="get strava activity",
                result=Container(Activity.from_dict),
                reason=reason,
            )

        return self.call_with_refresh(context, operation, reason=reason)
