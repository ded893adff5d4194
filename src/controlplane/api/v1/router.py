from fastapi import APIRouter

from src.controlplane.api.v1 import (
    backups,
    columns,
    functions,
    indexes,
    projects,
    rows,
    settings,
    stats,
    tables,
)

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(projects.router)
api_router.include_router(tables.router)
api_router.include_router(rows.router)
api_router.include_router(columns.router)
api_router.include_router(indexes.router)
api_router.include_router(functions.router)
api_router.include_router(backups.router)
api_router.include_router(settings.router)
api_router.include_router(stats.router)
