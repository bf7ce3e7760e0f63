import logging
from collections.abc import Mapping
from urllib.parse import urlencode

import httpx

from backend.settings import Settings


logger = logging.getLogger(__name__)

OAUTH_SCOPE = "user,repo"
CALLBACK_PATH = "/api/auth/github/callback"


class OAuthConfigurationError(Exception):
    """Raised when GitHub OAuth credentials are not configured."""


class OAuthExchangeError(Exception):
    """Raised when GitHub does not return an access token.

    `code` is the short error code passed back to the front-end.
    """

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


def redirect_uri(settings: Settings) -> str:
    return f"{settings.app_url.rstrip('/')}{CALLBACK_PATH}"


def build_authorize_url(settings: Settings) -> str:
    if not settings.github_client_id:
        raise OAuthConfigurationError("Missing GitHub Client ID")

    query = urlencode(
        {
            "client_id": settings.github_client_id,
            "redirect_uri": redirect_uri(settings),
            "scope": OAUTH_SCOPE,
        }
    )
    return f"{settings.github_oauth_authorize_url}?{query}"


async def exchange_code_for_token(
    code: str,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Exchange an OAuth authorization code for an access token."""

    if not settings.github_client_id or not settings.github_client_secret:
        raise OAuthConfigurationError("Missing GitHub OAuth credentials")

    try:
        async with httpx.AsyncClient(timeout=15.0, transport=transport) as client:
            response = await client.post(
                settings.github_oauth_token_url,
                json={
                    "client_id": settings.github_client_id,
                    "client_secret": settings.github_client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri(settings),
                },
                headers={"Accept": "application/json"},
            )
            payload = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("GitHub OAuth token exchange failed: %s", exc)
        raise OAuthExchangeError("server_error") from exc

    if not isinstance(payload, Mapping):
        raise OAuthExchangeError("server_error")

    error = payload.get("error")
    if error:
        logger.error("GitHub OAuth error: %s", error)
        raise OAuthExchangeError(str(error))

    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        logger.error("No access token received from GitHub")
        raise OAuthExchangeError("no_access_token")

    return access_token
