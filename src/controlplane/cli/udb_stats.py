"""
Print table sizes and index usage for every tenant database.

Run with:
    python -m src.controlplane.cli.udb_stats
    python -m src.controlplane.cli.udb_stats --db udb_0f8e...   # one database
    python -m src.controlplane.cli.udb_stats --unused-indexes   # only indexes never scanned

A database that cannot be read is reported and skipped.
"""

import argparse
import asyncio

from sqlalchemy.exc import DBAPIError

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.db import ControlPlaneDatabase, TenantDatabaseService
from src.controlplane.core.logging import get_logger, setup_logging
from src.controlplane.repositories import ProjectRepository
from src.controlplane.schemas.stats import DatabaseStats
from src.controlplane.services.stats_service import StatsService
from src.controlplane.services.tenant_connection_factory import TenantConnectionFactory

logger = get_logger(__name__)

PAGE_SIZE = 1000


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show tenant database statistics")
    parser.add_argument("--db", help="Only this tenant database")
    parser.add_argument("--schema", default="public")
    parser.add_argument(
        "--unused-indexes",
        action="store_true",
        help="List only indexes with no recorded scans",
    )
    parser.add_argument("--page-size", type=int, default=PAGE_SIZE)
    return parser.parse_args()


def format_bytes(size: int) -> str:
    value = float(size)
    for unit in ("B", "kB", "MB", "GB"):
        if value < 1024:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def render(stats: DatabaseStats, unused_only: bool = False) -> list[str]:
    lines = [f"{stats.db_name}  {format_bytes(stats.total_bytes)}"]
    if not unused_only:
        for table in stats.tables:
            ratio = "-" if table.index_scan_ratio is None else f"{table.index_scan_ratio:.0%}"
            lines.append(
                f"  {table.name:<32} {format_bytes(table.total_bytes):>10}  "
                f"rows={table.live_rows} dead={table.dead_rows} index_scans={ratio}"
            )
    for index in stats.indexes:
        if unused_only and not index.unused:
            continue
        lines.append(
            f"  idx {index.table_name}.{index.name:<28} {format_bytes(index.size_bytes):>10}  "
            f"scans={index.scans}"
        )
    return lines


async def collect_db_names(db: ControlPlaneDatabase, page_size: int = PAGE_SIZE) -> list[str]:
    names: list[str] = []
    async with db.session() as session:
        project_repo = ProjectRepository(session)
        cursor: str | None = None
        has_more = True
        while has_more:
            projects, cursor, has_more = await project_repo.list_all(cursor, page_size)
            names.extend(project.db_name for project in projects if project.db_name)
    return names


async def print_stats(
    service: StatsService,
    db_names: list[str],
    *,
    schema: str = "public",
    unused_only: bool = False,
) -> tuple[int, int]:
    """Print stats for each database.

    Returns:
        Tuple of (reported, failed)
    """
    reported = failed = 0
    for db_name in db_names:
        try:
            stats = await service.database_stats(db_name, schema)
        except (DBAPIError, OSError) as e:
            failed += 1
            error = str(e.orig) if isinstance(e, DBAPIError) else str(e)
            logger.error("Failed to read database stats", action="stats", db=db_name, error=error)
            print(f"{db_name}  unavailable")
            continue
        reported += 1
        print("\n".join(render(stats, unused_only)))
    return reported, failed


async def udb_stats(
    db: ControlPlaneDatabase,
    settings: Settings,
    *,
    only: str | None = None,
    schema: str = "public",
    unused_only: bool = False,
    page_size: int = PAGE_SIZE,
) -> tuple[int, int]:
    db_names = [only] if only else await collect_db_names(db, page_size)
    async with db.session() as session:
        factory = TenantConnectionFactory(
            TenantDatabaseService(db.engine, settings), ProjectRepository(session)
        )
        return await print_stats(
            StatsService(factory), db_names, schema=schema, unused_only=unused_only
        )


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug, component="cli")

    db = ControlPlaneDatabase(settings)
    db.init()
    try:
        reported, failed = await udb_stats(
            db,
            settings,
            only=args.db,
            schema=args.schema,
            unused_only=args.unused_indexes,
            page_size=args.page_size,
        )
    finally:
        await db.dispose()

    print(f"Done: {reported} reported, {failed} failed")


if __name__ == "__main__":
    asyncio.run(main())
