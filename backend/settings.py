from datetime import date

from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    The activity window defaults to Shamsi year 1403 and should be moved
    forward together with `shamsi_year`.
    """

    github_api_base_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"
    github_client_id: str | None = None
    github_client_secret: str | None = None
    github_oauth_authorize_url: str = "https://github.com/login/oauth/authorize"
    github_oauth_token_url: str = "https://github.com/login/oauth/access_token"
    app_url: str = "http://localhost:3000"

    activity_window_from: date = date(2024, 3, 21)
    activity_window_to: date = date(2025, 3, 20)
    shamsi_year: int = 1403
    events_page_size: int = 100
    events_max_pages: int = 10

    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def get_settings() -> Settings:
    """FastAPI dependency returning settings read at request time."""

    return Settings()
