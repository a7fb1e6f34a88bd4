"""sheetdiff HTTP service.

Main FastAPI application entry point.
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from sheetdiff import __version__
from sheetdiff.server import api
from sheetdiff.server.config import Settings, get_settings
from sheetdiff.server.logging import configure_logging
from sheetdiff.storage import WorkbookStore


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


async def cleanup_expired_files(store: WorkbookStore, interval_seconds: float) -> None:
    """Evict expired uploads every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        removed = store.cleanup_expired()
        if removed:
            logger.info(f"Cleaned up {removed} expired file(s)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings: Settings = app.state.settings

    logger.info(f"Starting sheetdiff server on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")

    cleanup_task = asyncio.create_task(
        cleanup_expired_files(app.state.store, settings.cleanup_interval_seconds)
    )

    yield

    cleanup_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await cleanup_task
    logger.info("Shutting down sheetdiff server")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to the cached environment settings
    """
    explicit_settings = settings is not None
    settings = settings or get_settings()

    configure_logging(
        is_production=settings.is_production,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )

    app = FastAPI(
        title="sheetdiff",
        description="Cell-by-cell comparison of spreadsheet workbooks",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.store = WorkbookStore(ttl=timedelta(seconds=settings.file_ttl_seconds))
    if explicit_settings:
        app.dependency_overrides[get_settings] = lambda: settings

    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(api.router, prefix="/api")

    return app


def run(host: str = "0.0.0.0", port: int | None = None) -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sheetdiff.server.main:create_app",
        factory=True,
        host=host,
        port=port or settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    run()
