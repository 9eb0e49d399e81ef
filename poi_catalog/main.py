"""
FastAPI application setup.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from contextlib import asynccontextmanager
from typing import Optional

from poi_catalog.config import Settings, get_settings
from poi_catalog.core.db import init_db
from poi_catalog.core.error_handlers import setup_error_handlers
from poi_catalog.core.logging import configure_logging
from poi_catalog.middleware import RequestContextMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: create tables on startup.
    """
    settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    try:
        init_db()
        logger.info("Application startup complete")
    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise

    yield

    logger.info("Application shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    configure_logging(
        level=settings.log_level.value,
        json_format=settings.log_json,
        fmt=settings.log_format,
        log_file=settings.log_file,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from poi_catalog.api import activities_router, favorites_router, health_router
    app.include_router(activities_router)
    app.include_router(favorites_router)
    app.include_router(health_router)

    @app.get("/")
    def root():
        """Service banner with the main endpoints."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running",
            "documentation": "/docs",
            "endpoints": {
                "activities": "GET /api/activities",
                "activityById": "GET /api/activities/{id}",
                "createActivity": "POST /api/activities",
                "updateActivity": "PUT /api/activities/{id}",
                "deleteActivity": "DELETE /api/activities/{id}",
                "importGeojson": "POST /api/activities/import/geojson",
                "exportGeojson": "GET /api/activities/export/geojson",
                "favorites": "GET /api/favorites",
                "addFavorite": "POST /api/favorites",
                "removeFavorite": "DELETE /api/favorites/{activityId}",
            },
        }

    return app


# Create application instance
app = create_app()
