from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.featuretree.api.middlewares import setup_middlewares
from src.featuretree.api.v1.router import api_router
from src.featuretree.core.config import get_settings
from src.featuretree.core.db import dispose_engine
from src.featuretree.core.exceptions import setup_exception_handlers
from src.featuretree.core.health import setup_health_endpoint, setup_metrics
from src.featuretree.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    if settings.storage_backend == "local":
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info(
        f"Starting {settings.app_name}",
        env=settings.app_env,
        storage_backend=settings.storage_backend,
    )

    yield

    logger.info("Closing connections...")
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "projects", "description": "Project management and feature trees"},
    {"name": "features", "description": "Feature CRUD, cascading delete and reordering"},
    {"name": "uploads", "description": "Image uploads for feature attachments"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Hierarchical feature tracker API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    setup_exception_handlers(app)
    setup_middlewares(app, settings)

    app.include_router(api_router)

    # Locally stored images are served by the app itself
    if settings.storage_backend == "local":
        app.mount(
            settings.upload_url_prefix,
            StaticFiles(directory=settings.upload_dir, check_dir=False),
            name="uploads",
        )

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
