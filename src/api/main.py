"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from identity.dependencies import close_spotify_client
from identity.presentation import router as identity_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_session,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import ConfigurationError, get_settings
from infrastructure.version import __version__
from tagging.presentation import router as tagging_router


@asynccontextmanager
async def moodring_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    - Identity provider HTTP client lifecycle
    """
    configure_logging(json_output=get_settings().log_json)
    probe = DefaultStartupProbe()
    probe.application_started(version=__version__)

    yield

    for resource, close in (
        ("spotify_client", close_spotify_client),
        ("database_engine", close_database_connections),
    ):
        try:
            await close()
        except Exception as e:
            probe.shutdown_cleanup_failed(resource=resource, error=str(e))
    probe.application_stopped()


app = FastAPI(
    title="Moodring API",
    description="Link Spotify accounts and tag tracks with personal moods",
    version=__version__,
    lifespan=moodring_lifespan,
)

app.include_router(identity_router)
app.include_router(tagging_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """Report missing configuration as a server error without details."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server is not configured"},
    )


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok", "message": "Moodring backend is running"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> JSONResponse:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "connected": False, "error": str(e)},
        )
    return JSONResponse(content={"status": "ok", "connected": True})
