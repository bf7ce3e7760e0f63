from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials

from backend.api.schemas.calendar import CalendarResponse
from backend.core.security import bearer_scheme
from backend.core.security import optional_bearer_token
from backend.github_api import build_github_client
from backend.models import ActivityWindow
from backend.services.activity_service import ActivityFetchError
from backend.services.activity_service import fetch_activities
from backend.services.calendar_service import ACTIVITY_CATEGORIES
from backend.services.calendar_service import build_calendar
from backend.services.calendar_service import heatmap_entries_from_activities
from backend.services.calendar_service import streak_entries_from_activities
from backend.services.sample_data import generate_sample_data
from backend.settings import Settings
from backend.settings import get_settings


router = APIRouter(prefix="/api/calendar")


@router.get("/sample", response_model=CalendarResponse)
def get_sample_calendar(
    seed: int | None = None,
    category: list[str] | None = Query(default=None),
    exclude: list[str] | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> CalendarResponse:
    """Return a calendar filled with generated sample data."""

    sample = generate_sample_data(settings.shamsi_year, seed=seed)
    calendar = build_calendar(
        settings.shamsi_year,
        sample["heatmap"],
        sample["streaks"],
        include=category,
        exclude=exclude,
    )
    return CalendarResponse(**calendar.model_dump(), categories=sample["categories"])


@router.get("/{username}", response_model=CalendarResponse)
async def get_activity_calendar(
    username: str,
    category: list[str] | None = Query(default=None),
    exclude: list[str] | None = Query(default=None),
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> CalendarResponse:
    """Return the Shamsi year calendar built from a user's GitHub activity."""

    token = optional_bearer_token(credentials)
    window = ActivityWindow(settings.activity_window_from, settings.activity_window_to)

    try:
        async with build_github_client(token, settings.github_api_base_url) as client:
            activities = await fetch_activities(
                client,
                username,
                window,
                page_size=settings.events_page_size,
                max_pages=settings.events_max_pages,
            )
    except ActivityFetchError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc

    heatmap = heatmap_entries_from_activities(activities, window, settings.shamsi_year)
    streaks = streak_entries_from_activities(activities, window, settings.shamsi_year)
    calendar = build_calendar(
        settings.shamsi_year, heatmap, streaks, include=category, exclude=exclude
    )
    return CalendarResponse(
        **calendar.model_dump(),
        username=username,
        categories=list(ACTIVITY_CATEGORIES),
    )
