"""Tenant database statistics."""

from pydantic import BaseModel, Field, computed_field


class IndexUsage(BaseModel):
    name: str
    table_name: str
    scans: int
    tuples_read: int
    size_bytes: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unused(self) -> bool:
        return self.scans == 0


class TableStats(BaseModel):
    """Sizes in bytes; counters are cumulative since the last stats reset."""

    name: str
    schema_name: str = Field(serialization_alias="schema")
    total_bytes: int
    table_bytes: int
    index_bytes: int
    live_rows: int
    dead_rows: int
    seq_scans: int
    index_scans: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def index_scan_ratio(self) -> float | None:
        """Share of scans that used an index; None before the first scan."""
        scans = self.seq_scans + self.index_scans
        return round(self.index_scans / scans, 4) if scans else None


class DatabaseStats(BaseModel):
    db_name: str
    total_bytes: int
    tables: list[TableStats]
    indexes: list[IndexUsage]
