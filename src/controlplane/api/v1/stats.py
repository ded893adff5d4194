"""Database statistics for the project in the X-Project header."""

from fastapi import APIRouter

from src.controlplane.api.dependencies import CurrentProject, StatsServiceDep
from src.controlplane.api.v1.params import SchemaName
from src.controlplane.schemas.stats import DatabaseStats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get(
    "",
    response_model=DatabaseStats,
    summary="Table sizes and index usage",
)
async def get_stats(
    project: CurrentProject, service: StatsServiceDep, schema: SchemaName = "public"
) -> DatabaseStats:
    return await service.database_stats(project.db_name, schema)
