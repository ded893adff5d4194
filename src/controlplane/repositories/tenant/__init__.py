"""Repositories that inspect and change a tenant database's schema."""

from src.controlplane.repositories.tenant.base import TenantSchemaRepository
from src.controlplane.repositories.tenant.column import ColumnRepository
from src.controlplane.repositories.tenant.function import FunctionRepository
from src.controlplane.repositories.tenant.index import IndexRepository
from src.controlplane.repositories.tenant.row import RowRepository
from src.controlplane.repositories.tenant.stats import StatsRepository
from src.controlplane.repositories.tenant.table import TableRepository

__all__ = [
    "ColumnRepository",
    "FunctionRepository",
    "IndexRepository",
    "RowRepository",
    "StatsRepository",
    "TableRepository",
    "TenantSchemaRepository",
]
