from collections.abc import Callable

import httpx
import pytest

from backend.github_api import build_github_client


API_BASE_URL = "https://api.github.test"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build a GitHub client whose requests are answered by `handler`."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response], token: str | None = None
    ) -> httpx.AsyncClient:
        return build_github_client(
            token, API_BASE_URL, transport=httpx.MockTransport(handler)
        )

    return factory


def make_event(
    event_type: str = "PushEvent",
    created_at: str = "2024-06-01T10:00:00Z",
    repo: str = "octocat/hello",
    payload: dict[str, object] | None = None,
) -> dict[str, object]:
    return {
        "id": "1",
        "type": event_type,
        "created_at": created_at,
        "repo": {"name": repo},
        "payload": payload or {},
    }
