"""Size and usage statistics for a tenant database."""

from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.schemas.stats import IndexUsage, TableStats

_TABLE_STATS = """
    SELECT
        s.relname::text AS name,
        s.schemaname::text AS schema_name,
        pg_total_relation_size(s.relid) AS total_bytes,
        pg_relation_size(s.relid) AS table_bytes,
        pg_indexes_size(s.relid) AS index_bytes,
        s.n_live_tup AS live_rows,
        s.n_dead_tup AS dead_rows,
        s.seq_scan AS seq_scans,
        COALESCE(s.idx_scan, 0) AS index_scans
    FROM pg_stat_user_tables s
    WHERE s.schemaname = :schema
    ORDER BY pg_total_relation_size(s.relid) DESC, s.relname
"""

_INDEX_USAGE = """
    SELECT
        s.indexrelname::text AS name,
        s.relname::text AS table_name,
        s.idx_scan AS scans,
        s.idx_tup_read AS tuples_read,
        pg_relation_size(s.indexrelid) AS size_bytes
    FROM pg_stat_user_indexes s
    WHERE s.schemaname = :schema
    ORDER BY s.relname, s.indexrelname
"""


class StatsRepository(TenantSchemaRepository):
    async def database_size(self) -> int:
        return int(await self._scalar("SELECT pg_database_size(current_database())"))

    async def table_stats(self, schema: str = "public") -> list[TableStats]:
        rows = await self._fetch_all(_TABLE_STATS, {"schema": schema})
        return [TableStats.model_validate(dict(row)) for row in rows]

    async def index_usage(self, schema: str = "public") -> list[IndexUsage]:
        rows = await self._fetch_all(_INDEX_USAGE, {"schema": schema})
        return [IndexUsage.model_validate(dict(row)) for row in rows]
