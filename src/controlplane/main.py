from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.controlplane.api.middlewares import setup_middlewares
from src.controlplane.api.v1.router import api_router
from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.db import ControlPlaneDatabase
from src.controlplane.core.exceptions import setup_exception_handlers
from src.controlplane.core.health import setup_health_endpoint
from src.controlplane.core.logging import get_logger, setup_logging
from src.controlplane.core.shutdown import request_tracker
from src.controlplane.temporal.client import close_temporal_client

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "projects", "description": "Projects and their tenant databases"},
    {"name": "tables", "description": "Tables in the project's tenant database"},
    {"name": "columns", "description": "Columns of a tenant table"},
    {"name": "indexes", "description": "Indexes of a tenant table"},
    {"name": "functions", "description": "Database functions in the tenant database"},
    {"name": "backups", "description": "Tenant database backups"},
    {"name": "settings", "description": "Platform settings"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - owns the control-plane database handle."""
    settings: Settings = app.state.settings
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}")

    db = ControlPlaneDatabase(settings)
    db.init()
    app.state.db = db

    yield

    grace_period = settings.shutdown_grace_period
    logger.info(f"Shutdown initiated, {request_tracker.in_flight_count} requests in flight")
    await request_tracker.drain(timeout=grace_period)

    logger.info("Closing connections...")
    await close_temporal_client()
    await db.dispose()
    logger.info("Shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Control plane for per-project PostgreSQL databases exposed through PostgREST",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )
    app.state.settings = settings

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    app.include_router(api_router)
    setup_health_endpoint(app)

    return app


app = create_app()
