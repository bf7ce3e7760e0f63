from collections.abc import Mapping
from datetime import date
from typing import Any

import httpx


USER_AGENT = "nowruz-github-wrapped"


def build_github_client(
    token: str | None,
    api_base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create a GitHub REST client bound to one session's token.

    The caller owns the client and should close it, usually with `async with`.
    """

    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    return httpx.AsyncClient(
        base_url=api_base_url,
        headers=headers,
        timeout=15.0,
        transport=transport,
    )


def is_authenticated(client: httpx.AsyncClient) -> bool:
    return "Authorization" in client.headers


async def _get_json(
    client: httpx.AsyncClient, path: str, params: Mapping[str, Any] | None = None
) -> Any:
    response = await client.get(path, params=params)
    response.raise_for_status()
    return response.json()


async def fetch_authenticated_user(client: httpx.AsyncClient) -> dict[str, str | int]:
    """Fetch basic profile data for the token owner from GitHub REST API."""

    payload = await _get_json(client, "/user")
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub user response is invalid")

    raw_id = payload.get("id")
    raw_login = payload.get("login")
    if not isinstance(raw_id, int) or not isinstance(raw_login, str) or not raw_login:
        raise ValueError("GitHub user response is missing required fields")

    return {"id": raw_id, "login": raw_login}


async def fetch_user(client: httpx.AsyncClient, username: str) -> dict[str, Any]:
    payload = await _get_json(client, f"/users/{username}")
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub user response is invalid")
    if not isinstance(payload.get("login"), str):
        raise ValueError("GitHub user response is missing required fields")
    return dict(payload)


async def fetch_repositories(
    client: httpx.AsyncClient, username: str, per_page: int = 5
) -> list[dict[str, Any]]:
    """Fetch the most recently updated repositories of a user."""

    payload = await _get_json(
        client,
        f"/users/{username}/repos",
        params={"sort": "updated", "per_page": per_page},
    )
    if not isinstance(payload, list):
        raise ValueError("GitHub repositories response is invalid")
    return [item for item in payload if isinstance(item, Mapping)]


async def fetch_events_page(
    client: httpx.AsyncClient, username: str, page: int, per_page: int
) -> list[Any]:
    """Fetch one page of a user's events.

    Authenticated clients use the events endpoint that includes private
    activity of the token owner; anonymous clients use the public one.
    """

    path = f"/users/{username}/events"
    if not is_authenticated(client):
        path += "/public"

    payload = await _get_json(
        client, path, params={"per_page": per_page, "page": page}
    )
    if not isinstance(payload, list):
        raise ValueError("GitHub events response is invalid")
    return payload


async def fetch_user_events(
    client: httpx.AsyncClient,
    username: str,
    page_size: int = 100,
    max_pages: int = 10,
) -> list[Any]:
    """Fetch a user's events page by page until a short page is returned.

    Pages are requested sequentially and never more than `max_pages` of them.
    """

    events: list[Any] = []
    for page in range(1, max(1, max_pages) + 1):
        items = await fetch_events_page(client, username, page, page_size)
        events.extend(items)
        if len(items) < page_size:
            break

    return events


async def fetch_contribution_days(
    client: httpx.AsyncClient,
    username: str,
    graphql_url: str,
    from_day: date,
    to_day: date,
) -> list[dict[str, str | int]]:
    """Fetch contribution days for a user from GitHub GraphQL API.

    GitHub rejects ranges longer than one year.
    """

    if not is_authenticated(client):
        raise ValueError("GitHub token is required for GraphQL requests")

    query = """
    query($login: String!, $from: DateTime!, $to: DateTime!) {
      user(login: $login) {
        contributionsCollection(from: $from, to: $to) {
          contributionCalendar {
            weeks {
              contributionDays {
                date
                contributionCount
              }
            }
          }
        }
      }
    }
    """

    variables = {
        "login": username,
        "from": f"{from_day.isoformat()}T00:00:00Z",
        "to": f"{to_day.isoformat()}T23:59:59Z",
    }

    response = await client.post(
        graphql_url,
        json={"query": query, "variables": variables},
        timeout=20.0,
    )
    response.raise_for_status()

    payload = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub GraphQL response is invalid")

    if payload.get("errors"):
        raise ValueError("GitHub GraphQL returned errors")

    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise ValueError("GitHub GraphQL data is missing")

    user = data.get("user")
    if not isinstance(user, Mapping):
        raise ValueError("GitHub user not found")

    collection = user.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise ValueError("GitHub contributionsCollection is missing")

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise ValueError("GitHub contributionCalendar is missing")

    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise ValueError("GitHub contribution weeks are missing")

    days: list[dict[str, str | int]] = []
    for week in weeks:
        if not isinstance(week, Mapping):
            continue
        contribution_days = week.get("contributionDays")
        if not isinstance(contribution_days, list):
            continue
        for item in contribution_days:
            if not isinstance(item, Mapping):
                continue
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if isinstance(raw_date, str) and isinstance(raw_count, int):
                days.append({"date": raw_date, "count": raw_count})

    return days
