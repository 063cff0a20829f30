r"""Authorization URLs of the Strava OAuth flow."""

from __future__ import annotations

__all__ = ["Platform", "build_authorization_url"]

from enum import Enum
from urllib.parse import urlencode


class Platform(Enum):
    """Authorization endpoint to send the user to, by client platform."""

    WEB = "https://www.strava.com/oauth/authorize"
    IOS = "strava://oauth/mobile/authorize"
    ANDROID = "https://www.strava.com/oauth/mobile/authorize"


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scope: str,
    platform: Platform = Platform.WEB,
) -> str:
    r"""Build the URL redirecting a user to the Strava consent page.

    The function is pure. Every value is URL-encoded so distinct inputs
    always give distinct URLs.

    Args:
        client_id: The OAuth client identifier.
        redirect_uri: The URI Strava redirects to with the code.
        scope: Comma-separated list of requested scopes.
        platform: The platform whose authorization endpoint is used.

    Returns:
        The authorization URL.

    Example:
        ```pycon
        >>> from arestrava.strava.auth import build_authorization_url
        >>> build_authorization_url("123", "https://app.test/cb", "read,activity:read")
        'https://www.strava.com/oauth/authorize?client_id=123&response_type=code&redirect_uri=https%3A%2F%2Fapp.test%2Fcb&approval_prompt=auto&scope=read%2Cactivity%3Aread'

        ```
    """
    query = urlencode(
        {
            "client_id": client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "approval_prompt": "auto",
            "scope": scope,
        }
    )
    return f"{platform.value}?{query}"
