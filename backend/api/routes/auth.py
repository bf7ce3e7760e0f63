import logging
from urllib.parse import urlencode

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Security
from fastapi.responses import JSONResponse
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials
from starlette.responses import Response

from backend.api.schemas.auth import SessionStatus
from backend.core.security import bearer_scheme
from backend.core.security import optional_bearer_token
from backend.services.oauth_service import OAuthConfigurationError
from backend.services.oauth_service import OAuthExchangeError
from backend.services.oauth_service import build_authorize_url
from backend.services.oauth_service import exchange_code_for_token
from backend.services.session import AuthSession
from backend.services.session import MemoryTokenStore
from backend.settings import Settings
from backend.settings import get_settings


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth/github")


def _home_redirect(**params: str) -> RedirectResponse:
    return RedirectResponse(url=f"/?{urlencode(params)}")


@router.get("")
def start_github_login(settings: Settings = Depends(get_settings)) -> Response:
    """Redirect the browser to the GitHub authorization page."""

    try:
        authorize_url = build_authorize_url(settings)
    except OAuthConfigurationError:
        logger.error("Missing GITHUB_CLIENT_ID environment variable")
        return JSONResponse(
            status_code=500,
            content={"error": "Server configuration error: Missing GitHub Client ID"},
        )

    return RedirectResponse(url=authorize_url)


@router.get("/callback")
async def github_callback(
    code: str | None = None, settings: Settings = Depends(get_settings)
) -> RedirectResponse:
    """Exchange the OAuth code and hand the token back to the front-end."""

    if not code:
        logger.error("No code provided in GitHub OAuth callback")
        return _home_redirect(error="oauth_callback_error")

    try:
        token = await exchange_code_for_token(code, settings)
    except OAuthConfigurationError:
        logger.error("Missing GitHub OAuth credentials in environment variables")
        return _home_redirect(error="server_configuration_error")
    except OAuthExchangeError as exc:
        return _home_redirect(error=exc.code)

    logger.info("Received GitHub access token")
    return _home_redirect(token=token)


@router.get("/session", response_model=SessionStatus)
async def get_session_status(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> SessionStatus:
    """Validate the bearer token the front-end got from the callback redirect."""

    session = AuthSession(MemoryTokenStore(), settings.github_api_base_url)
    token = optional_bearer_token(credentials)
    if token:
        session.login(token)

    authenticated = await session.validate()
    return SessionStatus(authenticated=authenticated, error=session.error)
