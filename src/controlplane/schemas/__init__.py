from src.controlplane.schemas.backup import BackupRead, BackupWorkflowResponse
from src.controlplane.schemas.column import (
    Column,
    ColumnAlter,
    ColumnCreate,
    ColumnRename,
    ColumnsAlterRequest,
    ColumnsCreateRequest,
)
from src.controlplane.schemas.function import Function, FunctionCreate, FunctionParameter
from src.controlplane.schemas.index import Index, IndexCreate
from src.controlplane.schemas.pagination import PaginatedResponse
from src.controlplane.schemas.project import (
    ProjectCreate,
    ProjectDeleteResponse,
    ProjectRead,
    ProjectUpdate,
)
from src.controlplane.schemas.row import RowCreate, RowPage, RowUpdate
from src.controlplane.schemas.setting import StorageDriverRead, StorageDriverUpdate
from src.controlplane.schemas.stats import DatabaseStats, IndexUsage, TableStats
from src.controlplane.schemas.table import Table, TableCreate, TableDuplicate, TableRename

__all__ = [
    # Backup
    "BackupRead",
    "BackupWorkflowResponse",
    # Column
    "Column",
    "ColumnAlter",
    "ColumnCreate",
    "ColumnRename",
    "ColumnsAlterRequest",
    "ColumnsCreateRequest",
    # Function
    "Function",
    "FunctionCreate",
    "FunctionParameter",
    # Index
    "Index",
    "IndexCreate",
    # Pagination
    "PaginatedResponse",
    # Project
    "ProjectCreate",
    "ProjectDeleteResponse",
    "ProjectRead",
    "ProjectUpdate",
    # Row
    "RowCreate",
    "RowPage",
    "RowUpdate",
    # Setting
    "StorageDriverRead",
    "StorageDriverUpdate",
    # Stats
    "DatabaseStats",
    "IndexUsage",
    "TableStats",
    # Table
    "Table",
    "TableCreate",
    "TableDuplicate",
    "TableRename",
]
