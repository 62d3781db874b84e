"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pixelboard.api.activity import router as activity_router
from pixelboard.api.albums import router as albums_router
from pixelboard.api.errors import setup_exception_handlers
from pixelboard.api.photos import router as photos_router
from pixelboard.app_logging import configure_logging
from pixelboard.config import parse_cors_origins
from pixelboard.containers import AppContainer

_ENDPOINTS = {
    "photos": {
        "upload": "POST /api/photos/upload",
        "myPhotos": "GET /api/photos/my-photos",
        "allPhotos": "GET /api/photos/all",
        "getPhoto": "GET /api/photos/:id",
        "status": "GET /api/photos/:id/status",
        "reprocess": "POST /api/photos/:id/reprocess",
        "deletePhoto": "DELETE /api/photos/:id",
    },
    "albums": {
        "create": "POST /api/albums/create",
        "myAlbums": "GET /api/albums/my-albums",
        "allAlbums": "GET /api/albums/all",
        "getAlbum": "GET /api/albums/:id",
        "addPhotos": "POST /api/albums/:id/add-photos",
        "removePhotos": "POST /api/albums/:id/remove-photos",
        "deleteAlbum": "DELETE /api/albums/:id",
    },
    "activity": {"mine": "GET /api/activity/me"},
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        await state_container.activity_logger.start()
        logger.info(
            "PixelBoard API started", extra={"environment": settings.environment}
        )
        try:
            yield
        finally:
            await state_container.activity_logger.stop()
            await state_container.close_resources()

    app = FastAPI(
        title="PixelBoard API", version=settings.app_version, lifespan=lifespan
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(settings.cors_origins, settings.environment),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(app, settings.environment)

    app.include_router(photos_router)
    app.include_router(albums_router)
    app.include_router(activity_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(tz=UTC).isoformat(),
            "environment": settings.environment,
            "version": settings.app_version,
        }

    @app.get("/api")
    async def api_info() -> dict[str, object]:
        """Describe the API and list its endpoints."""
        return {
            "name": "PixelBoard API",
            "version": settings.app_version,
            "description": "Photo sharing with albums and derived thumbnails",
            "endpoints": _ENDPOINTS,
        }

    return app
