from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer


bearer_scheme = HTTPBearer(auto_error=False)


def optional_bearer_token(
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """Return the Bearer token when one was sent, otherwise None.

    Requests without a usable token fall back to anonymous GitHub access.
    """

    if credentials is None:
        return None

    if credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        return None

    return credentials.credentials.strip()
