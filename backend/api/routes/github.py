from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials

from backend.api.schemas.github import UserDataResponse
from backend.core.security import bearer_scheme
from backend.core.security import optional_bearer_token
from backend.github_api import build_github_client
from backend.models import ActivityWindow
from backend.services.profile_service import GitHubAPIError
from backend.services.profile_service import InvalidGitHubTokenError
from backend.services.profile_service import UserNotFoundError
from backend.services.profile_service import get_user_data
from backend.settings import Settings
from backend.settings import get_settings


router = APIRouter(prefix="/api/github")


@router.get("/{username}", response_model=UserDataResponse)
async def get_github_user_data(
    username: str,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    """Return profile, repositories, activity and score for a GitHub user."""

    token = optional_bearer_token(credentials)
    window = ActivityWindow(settings.activity_window_from, settings.activity_window_to)

    try:
        async with build_github_client(token, settings.github_api_base_url) as client:
            return await get_user_data(
                client,
                username=username,
                window=window,
                shamsi_year=settings.shamsi_year,
                graphql_url=settings.github_graphql_url,
                page_size=settings.events_page_size,
                max_pages=settings.events_max_pages,
            )
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail="GitHub user not found") from exc
    except InvalidGitHubTokenError as exc:
        raise HTTPException(status_code=401, detail="GitHub token is invalid") from exc
    except GitHubAPIError as exc:
        raise HTTPException(
            status_code=502,
            detail=(
                "Failed to fetch GitHub data. "
                "Please check the username and try again."
            ),
        ) from exc
