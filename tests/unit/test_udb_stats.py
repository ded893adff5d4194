"""Tests for the udb_stats operator command."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.controlplane.cli import udb_stats as cli
from src.controlplane.schemas.stats import DatabaseStats, IndexUsage, TableStats

pytestmark = pytest.mark.unit


def stats_for(db_name: str) -> DatabaseStats:
    return DatabaseStats(
        db_name=db_name,
        total_bytes=3 * 1024 * 1024,
        tables=[
            TableStats(
                name="orders",
                schema_name="public",
                total_bytes=65536,
                table_bytes=49152,
                index_bytes=16384,
                live_rows=120,
                dead_rows=3,
                seq_scans=1,
                index_scans=3,
            )
        ],
        indexes=[
            IndexUsage(name="orders_pkey", table_name="orders", scans=9, tuples_read=9, size_bytes=16384),
            IndexUsage(name="orders_note_idx", table_name="orders", scans=0, tuples_read=0, size_bytes=8192),
        ],
    )


@pytest.mark.parametrize(
    ("size", "expected"),
    [(512, "512 B"), (2048, "2.0 kB"), (3 * 1024 * 1024, "3.0 MB"), (5 * 1024**4, "5.0 TB")],
)
def test_format_bytes(size, expected):
    assert cli.format_bytes(size) == expected


def test_render_lists_tables_and_indexes():
    lines = cli.render(stats_for("udb_a"))

    assert lines[0] == "udb_a  3.0 MB"
    assert "index_scans=75%" in lines[1]
    assert len(lines) == 4


def test_render_unused_only():
    lines = cli.render(stats_for("udb_a"), unused_only=True)

    assert len(lines) == 2
    assert "orders_note_idx" in lines[1]


async def test_unreadable_database_is_skipped(capsys, capturing_logger):
    service = MagicMock()
    service.database_stats = AsyncMock(
        side_effect=[
            OperationalError("connect", {}, Exception('database "udb_gone" does not exist')),
            stats_for("udb_b"),
        ]
    )

    reported, failed = await cli.print_stats(service, ["udb_gone", "udb_b"])

    assert (reported, failed) == (1, 1)
    out = capsys.readouterr().out
    assert "udb_gone  unavailable" in out
    assert "udb_b  3.0 MB" in out
    [error] = [c for c in capturing_logger.calls if c.method_name == "error"]
    assert error.kwargs["db"] == "udb_gone"
    assert "does not exist" in error.kwargs["error"]
