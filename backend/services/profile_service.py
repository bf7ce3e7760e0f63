import logging
import math
from collections import Counter
from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from datetime import date
from typing import Any

import httpx

from backend.github_api import fetch_contribution_days
from backend.github_api import fetch_events_page
from backend.github_api import fetch_repositories
from backend.github_api import fetch_user
from backend.github_api import fetch_user_events
from backend.github_api import is_authenticated
from backend.models import ActivityWindow
from backend.models import Contribution
from backend.models import Repository
from backend.models import UserProfile
from backend.services.activity_service import classify_events
from backend.shamsi import SEASONS
from backend.shamsi import season_for_month
from backend.shamsi import shamsi_date_from_offset


logger = logging.getLogger(__name__)

TOP_REPOSITORIES = 5
RECENT_EVENTS = 10

REPO_SCORE_CEILING = 40
ACTIVITY_SCORE_CEILING = 20
CONTRIBUTION_SCORE_CEILING = 30
FOLLOWER_SCORE_CEILING = 10


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail for any reason other than a rejected token.

    Rate limiting (403 or 429) ends up here as well.
    """


class UserNotFoundError(GitHubAPIError):
    """Raised when GitHub has no user with the requested login."""


class InvalidGitHubTokenError(Exception):
    """Raised when GitHub rejects the provided token."""


def calculate_performance_score(
    profile: UserProfile,
    repos: Sequence[Repository],
    events: Sequence[Any],
    contributions: Iterable[Contribution],
) -> int:
    """Weighted score in range 0..100.

    Stars and forks give up to 40 points, recent events 20, contributions 30
    and followers 10.
    """

    repo_score = min(
        sum(repo.stargazers_count + repo.forks_count for repo in repos) / 10,
        REPO_SCORE_CEILING,
    )
    activity_score = min(len(events) * 2, ACTIVITY_SCORE_CEILING)
    contribution_score = min(
        sum(day.count for day in contributions) / 100, CONTRIBUTION_SCORE_CEILING
    )
    follower_score = min(profile.followers / 10, FOLLOWER_SCORE_CEILING)

    # Halves round up.
    raw_score = repo_score + activity_score + contribution_score + follower_score
    total = math.floor(raw_score + 0.5)
    return max(0, min(total, 100))


def score_category(score: int) -> str:
    if score >= 90:
        return "Exceptional"
    if score >= 75:
        return "Outstanding"
    if score >= 60:
        return "Excellent"
    if score >= 40:
        return "Good"
    return "Promising"


def calculate_languages(repos: Iterable[Repository]) -> dict[str, int]:
    """Count repositories per primary language."""

    return dict(Counter(repo.language for repo in repos if repo.language))


def seasonal_breakdown(
    contributions: Iterable[Contribution], window: ActivityWindow, shamsi_year: int
) -> dict[str, int]:
    totals = {season: 0 for season in SEASONS}
    for contribution in contributions:
        shamsi_day = shamsi_date_from_offset(
            contribution.date, window.start, shamsi_year
        )
        if shamsi_day is None:
            continue
        totals[season_for_month(shamsi_day[1])] += contribution.count
    return totals


def profile_from_payload(payload: Mapping[str, Any]) -> UserProfile:
    return UserProfile(
        login=payload["login"],
        name=payload.get("name"),
        avatar_url=payload.get("avatar_url") or "",
        bio=payload.get("bio"),
        followers=payload.get("followers") or 0,
        following=payload.get("following") or 0,
        public_repos=payload.get("public_repos") or 0,
        created_at=payload.get("created_at") or "",
    )


def repository_from_payload(payload: Mapping[str, Any]) -> Repository:
    return Repository(
        id=payload["id"],
        name=payload["name"],
        description=payload.get("description"),
        language=payload.get("language"),
        stargazers_count=payload.get("stargazers_count") or 0,
        forks_count=payload.get("forks_count") or 0,
        updated_at=payload.get("updated_at") or "",
        url=payload.get("html_url") or "",
    )


def recent_activity_from_events(events: Iterable[Any]) -> list[dict[str, object]]:
    activity: list[dict[str, object]] = []
    for event in events:
        if not isinstance(event, Mapping):
            continue
        repo = event.get("repo")
        repo_name = repo.get("name") if isinstance(repo, Mapping) else None
        if not isinstance(repo_name, str):
            continue
        payload = event.get("payload")
        activity.append(
            {
                "type": str(event.get("type") or ""),
                "repo": repo_name,
                "repo_url": f"https://github.com/{repo_name}",
                "created_at": str(event.get("created_at") or ""),
                "payload": payload if isinstance(payload, Mapping) else None,
            }
        )
    return activity


def contributions_from_days(days: Iterable[Mapping[str, Any]]) -> list[Contribution]:
    contributions: list[Contribution] = []
    for item in days:
        raw_day = item.get("date")
        raw_count = item.get("count")
        if not isinstance(raw_day, str) or not isinstance(raw_count, int):
            continue
        try:
            contributions.append(
                Contribution(date=date.fromisoformat(raw_day), count=raw_count)
            )
        except ValueError:
            continue
    return contributions


def contributions_from_events(
    raw_events: Iterable[Any], window: ActivityWindow
) -> list[Contribution]:
    """Count classified events per calendar day inside `window`."""

    activities = classify_events(raw_events, window)
    per_day = Counter(activity.date.date() for activity in activities)
    return [
        Contribution(date=day, count=count) for day, count in sorted(per_day.items())
    ]


async def _fetch_contributions(
    client: httpx.AsyncClient,
    username: str,
    window: ActivityWindow,
    graphql_url: str,
    page_size: int,
    max_pages: int,
) -> list[Contribution]:
    if is_authenticated(client):
        days = await fetch_contribution_days(
            client,
            username=username,
            graphql_url=graphql_url,
            from_day=window.start,
            to_day=window.end,
        )
        return contributions_from_days(days)

    raw_events = await fetch_user_events(
        client, username, page_size=page_size, max_pages=max_pages
    )
    return contributions_from_events(raw_events, window)


async def get_user_data(
    client: httpx.AsyncClient,
    username: str,
    window: ActivityWindow,
    shamsi_year: int,
    graphql_url: str,
    page_size: int = 100,
    max_pages: int = 10,
) -> dict[str, object]:
    """Collect everything the story carousel shows for one user."""

    try:
        user_payload = await fetch_user(client, username)
        repo_payloads = await fetch_repositories(
            client, username, per_page=TOP_REPOSITORIES
        )
        events = await fetch_events_page(
            client, username, page=1, per_page=RECENT_EVENTS
        )
        contributions = await _fetch_contributions(
            client, username, window, graphql_url, page_size, max_pages
        )
        profile = profile_from_payload(user_payload)
        repos = [repository_from_payload(item) for item in repo_payloads]
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        logger.warning(
            "GitHub request for %s failed with status %s", username, status_code
        )
        if status_code == 404:
            raise UserNotFoundError(username) from exc
        if status_code == 401 and is_authenticated(client):
            raise InvalidGitHubTokenError from exc
        raise GitHubAPIError from exc
    except (httpx.HTTPError, ValueError, KeyError) as exc:
        logger.warning("GitHub request for %s failed: %s", username, exc)
        raise GitHubAPIError from exc

    score = calculate_performance_score(profile, repos, events, contributions)
    return {
        "profile": profile.model_dump(),
        "top_repositories": [repo.model_dump() for repo in repos],
        "recent_activity": recent_activity_from_events(events),
        "contributions": [
            {"date": day.date.isoformat(), "count": day.count} for day in contributions
        ],
        "languages": calculate_languages(repos),
        "seasons": seasonal_breakdown(contributions, window, shamsi_year),
        "performance_score": score,
        "score_category": score_category(score),
    }
