import json
import logging
from pathlib import Path
from typing import Protocol
from urllib.parse import parse_qsl
from urllib.parse import urlencode
from urllib.parse import urlsplit
from urllib.parse import urlunsplit

import httpx

from backend.github_api import build_github_client
from backend.github_api import fetch_authenticated_user


logger = logging.getLogger(__name__)

TOKEN_KEY = "github_token"
TOKEN_PARAM = "token"
ERROR_PARAM = "error"
INVALID_TOKEN_ERROR = "Invalid authentication token"


class TokenStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, token: str) -> None: ...

    def remove(self) -> None: ...


class MemoryTokenStore:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def remove(self) -> None:
        self._token = None


class FileTokenStore:
    """Keeps the token in a small JSON file under the `github_token` key."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def get(self) -> str | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("Token file %s is unreadable, ignoring it", self.path)
            return None

        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({TOKEN_KEY: token}), encoding="utf-8")

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)


def _strip_query_params(url: str, names: set[str]) -> str:
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in names
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


class AuthSession:
    """Bearer token state of one client.

    The session is logged in while it holds a token. A token confirmed
    invalid by GitHub is dropped from memory and from the store.
    """

    def __init__(
        self,
        store: TokenStore,
        api_base_url: str = "https://api.github.com",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.store = store
        self.api_base_url = api_base_url
        self._transport = transport
        self.token: str | None = None
        self.error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def initialize(self, url: str) -> str:
        """Restore the stored token and take over `token`/`error` URL params.

        Returns the URL with those params removed. Call `validate()` when the
        token came from the URL.
        """

        stored_token = self.store.get()
        if stored_token:
            self.token = stored_token

        params = dict(parse_qsl(urlsplit(url).query))
        url_error = params.get(ERROR_PARAM)
        url_token = params.get(TOKEN_PARAM)

        if url_error:
            logger.error("Auth error from URL: %s", url_error)
            self.error = url_error

        if url_token:
            logger.info("Using token from OAuth redirect")
            self.token = url_token
            self.store.set(url_token)

        return _strip_query_params(url, {TOKEN_PARAM, ERROR_PARAM})

    def login(self, token: str) -> None:
        self.token = token
        self.error = None
        self.store.set(token)

    def logout(self) -> None:
        self.token = None
        self.error = None
        self.store.remove()

    def client(self) -> httpx.AsyncClient:
        """Build a GitHub client carrying this session's token."""

        return build_github_client(
            self.token, self.api_base_url, transport=self._transport
        )

    async def validate(self) -> bool:
        """Check the token with one profile request.

        A rejected token logs the session out and records an error. Network
        failures leave the session as it is.
        """

        if not self.token:
            return False

        try:
            async with self.client() as client:
                await fetch_authenticated_user(client)
        except httpx.HTTPStatusError as exc:
            logger.error("Token validation failed: %s", exc.response.status_code)
            self.token = None
            self.store.remove()
            self.error = INVALID_TOKEN_ERROR
            return False
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error validating token: %s", exc)
            return True

        return True
