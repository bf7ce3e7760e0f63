import logging

from fastapi import FastAPI

from backend.api.routes.auth import router as auth_router
from backend.api.routes.calendar import router as calendar_router
from backend.api.routes.github import router as github_router
from backend.api.routes.health import router as health_router
from backend.core.middleware import GitHubRateLimitMiddleware
from backend.core.observability import configure_logging
from backend.core.observability import init_sentry
from backend.settings import Settings


logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application with middleware and routers."""

    app_settings = app_settings or Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    application = FastAPI(title="Nowruz GitHub Wrapped")
    application.add_middleware(
        GitHubRateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    application.include_router(health_router)
    application.include_router(auth_router)
    application.include_router(github_router)
    application.include_router(calendar_router)

    logger.debug("Application created for %s environment", app_settings.environment)
    return application


app = create_app()
