"""Per-database table sizes and index usage."""

from src.controlplane.core.logging import get_logger
from src.controlplane.schemas.stats import DatabaseStats
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory

logger = get_logger(__name__)


class StatsService:
    def __init__(self, connection_factory: TenantConnectionFactory):
        self.connection_factory = connection_factory

    async def database_stats(self, db_name: str, schema: str = "public") -> DatabaseStats:
        """Read sizes and scan counters from the tenant's statistics views.

        Counters come from pg_stat_*, so they reset with the server's
        statistics and are approximate under concurrent load.
        """
        repo, conn = self.connection_factory.get_stats_repo(db_name)
        async with conn:
            stats = DatabaseStats(
                db_name=db_name,
                total_bytes=await repo.database_size(),
                tables=await repo.table_stats(schema),
                indexes=await repo.index_usage(schema),
            )
        logger.debug(
            "Database stats read",
            action="stats",
            db=db_name,
            tables=len(stats.tables),
            indexes=len(stats.indexes),
        )
        return stats
