from fastapi.testclient import TestClient

from backend.main import create_app
from backend.services.activity_service import ActivityFetchError


def test_github_routes_rate_limited_after_threshold(monkeypatch) -> None:
    """Rate limiter blocks repeated requests to GitHub-backed routes."""

    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")

    async def failing_fetch(*args, **kwargs):
        raise ActivityFetchError("GitHub API request failed")

    monkeypatch.setattr("backend.api.routes.calendar.fetch_activities", failing_fetch)
    app = create_app()
    client = TestClient(app)

    headers = {"X-Forwarded-For": "203.0.113.10"}

    first = client.get("/api/calendar/octocat", headers=headers)
    second = client.get("/api/github/octocat", headers=headers)

    assert first.status_code == 502
    assert second.status_code == 429
    assert second.headers["Retry-After"]


def test_limits_are_tracked_per_client_ip(monkeypatch) -> None:
    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")

    async def failing_fetch(*args, **kwargs):
        raise ActivityFetchError("GitHub API request failed")

    monkeypatch.setattr("backend.api.routes.calendar.fetch_activities", failing_fetch)
    client = TestClient(create_app())

    first = client.get("/api/calendar/a", headers={"X-Forwarded-For": "203.0.113.1"})
    second = client.get("/api/calendar/b", headers={"X-Forwarded-For": "203.0.113.2"})

    assert first.status_code == 502
    assert second.status_code == 502


def test_local_routes_not_rate_limited(monkeypatch) -> None:
    """Rate limiter does not affect routes that never call GitHub."""

    monkeypatch.setenv("RATE_LIMIT_PER_MINUTE", "1")
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "60")
    app = create_app()
    client = TestClient(app)

    for path in ("/", "/", "/api/calendar/sample", "/api/calendar/sample"):
        assert client.get(path).status_code == 200
