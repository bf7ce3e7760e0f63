import logging
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import httpx

from backend.github_api import fetch_user_events
from backend.models import Activity
from backend.models import ActivityType
from backend.models import ActivityWindow


logger = logging.getLogger(__name__)

EVENT_TYPE_MAP: dict[str, ActivityType] = {
    "PushEvent": ActivityType.COMMIT,
    "PullRequestEvent": ActivityType.PULL_REQUEST,
    "PullRequestReviewEvent": ActivityType.REVIEW,
    "WatchEvent": ActivityType.STAR_GIVEN,
    "CreateEvent": ActivityType.REPO_CREATION,
    "ForkEvent": ActivityType.FORK_MADE,
    "IssueCommentEvent": ActivityType.ISSUE,
}


class ActivityFetchError(Exception):
    """Raised when the activity history could not be fetched completely."""


def parse_github_datetime(raw_value: str) -> datetime:
    return datetime.fromisoformat(raw_value.replace("Z", "+00:00"))


def classify_event_type(event_type: str) -> ActivityType:
    return EVENT_TYPE_MAP.get(event_type, ActivityType.OTHER)


def classify_events(
    raw_events: Iterable[Any], window: ActivityWindow
) -> list[Activity]:
    """Turn raw upstream events into activities inside `window`.

    Events without a usable type or timestamp are skipped.
    """

    activities: list[Activity] = []
    for item in raw_events:
        if not isinstance(item, Mapping):
            continue

        event_type = item.get("type")
        created_at_raw = item.get("created_at")
        repo_data = item.get("repo")
        repo_name = repo_data.get("name") if isinstance(repo_data, Mapping) else None

        if not isinstance(event_type, str):
            continue
        if not isinstance(created_at_raw, str):
            continue

        try:
            created_at = parse_github_datetime(created_at_raw)
        except ValueError:
            continue

        if not window.contains(created_at.date()):
            continue

        activities.append(
            Activity(
                date=created_at,
                type=classify_event_type(event_type),
                repo=repo_name if isinstance(repo_name, str) else "",
            )
        )

    return activities


async def fetch_activities(
    client: httpx.AsyncClient,
    username: str,
    window: ActivityWindow,
    page_size: int = 100,
    max_pages: int = 10,
) -> list[Activity]:
    """Fetch, filter and classify every event of `username` inside `window`.

    Whether private activity is included depends on the client carrying a
    token. Either the whole list is returned or ActivityFetchError is raised.
    """

    try:
        raw_events = await fetch_user_events(
            client, username, page_size=page_size, max_pages=max_pages
        )
    except httpx.HTTPStatusError as exc:
        logger.warning(
            "GitHub events request for %s failed with status %s",
            username,
            exc.response.status_code,
        )
        raise ActivityFetchError("GitHub API request failed") from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("GitHub events request for %s failed: %s", username, exc)
        raise ActivityFetchError("GitHub API request failed") from exc

    activities = classify_events(raw_events, window)
    logger.debug(
        "Fetched %d events for %s, %d inside window",
        len(raw_events),
        username,
        len(activities),
    )
    return activities
