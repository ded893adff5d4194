"""Health check endpoint with dependency validation and caching."""

import time
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.controlplane.core.db import ControlPlaneDatabase
from src.controlplane.core.shutdown import request_tracker
from src.controlplane.temporal.client import get_temporal_client

HEALTH_CACHE_TTL = 10  # seconds

_health_cache: dict[str, Any] | None = None
_health_cache_time: float = 0


def reset_health_cache() -> None:
    """Reset health cache (for testing)."""
    global _health_cache, _health_cache_time
    _health_cache = None
    _health_cache_time = 0


async def check_health(db: ControlPlaneDatabase) -> dict[str, Any]:
    """Check the control-plane database and Temporal.

    A database failure makes the API unhealthy. Temporal being unreachable
    only degrades it: schema operations still work, backups and container
    changes cannot be queued.
    """
    status: dict[str, Any] = {
        "status": "healthy",
        "database": "unknown",
        "temporal": "unknown",
        "cached": False,
        "timestamp": time.time(),
    }

    try:
        async with db.session() as session:
            await session.execute(text("SELECT 1"))
        status["database"] = "healthy"
    except Exception as e:
        status["database"] = f"unhealthy: {e!s}"
        status["status"] = "unhealthy"

    try:
        await get_temporal_client()
        status["temporal"] = "healthy"
    except Exception as e:
        status["temporal"] = f"unhealthy: {e!s}"
        if status["status"] == "healthy":
            status["status"] = "degraded"

    return status


def setup_health_endpoint(app: FastAPI) -> None:
    """Configure the health check endpoint."""

    @app.get("/health")
    async def health(request: Request) -> JSONResponse:
        global _health_cache, _health_cache_time

        if request_tracker.is_shutting_down:
            return JSONResponse(
                content={
                    "status": "draining",
                    "in_flight_requests": request_tracker.in_flight_count,
                },
                status_code=503,
            )

        now = time.time()
        if _health_cache and (now - _health_cache_time) < HEALTH_CACHE_TTL:
            cached = {**_health_cache, "cached": True}
            cached["cache_age_seconds"] = round(now - _health_cache_time, 1)
            return JSONResponse(
                content=cached, status_code=200 if cached["status"] == "healthy" else 503
            )

        _health_cache = await check_health(request.app.state.db)
        _health_cache_time = now
        return JSONResponse(
            content=_health_cache,
            status_code=200 if _health_cache["status"] == "healthy" else 503,
        )
