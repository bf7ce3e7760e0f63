from pydantic import BaseModel


class SessionStatus(BaseModel):
    """Whether GitHub still accepts the caller's token."""

    authenticated: bool
    error: str | None = None
