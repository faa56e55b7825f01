"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from payroll_integration import __version__
from payroll_integration.api.routes import health_router, integration_router
from payroll_integration.config import get_settings
from payroll_integration.database import dispose_db, init_db
from payroll_integration.services.factory import integration_service_scope
from payroll_integration.services.scheduler import BackgroundSync

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    await init_db()

    sync: BackgroundSync | None = None
    if settings.scheduler_enabled:
        sync = BackgroundSync(integration_service_scope, interval=settings.sync_interval_seconds)
        sync.start()
    app.state.background_sync = sync

    yield

    if sync is not None:
        await sync.stop()
    await dispose_db()


def create_app(*, use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Integration API",
        description="Time import, payroll export and integration health",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(integration_router, prefix="/api/v1")

    return app
