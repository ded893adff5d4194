"""Repository layer - data access abstraction."""

from src.controlplane.repositories.base import BaseRepository
from src.controlplane.repositories.public import (
    BackupRepository,
    OrganizationRepository,
    ProjectRepository,
    SettingRepository,
    WorkflowExecutionRepository,
)
from src.controlplane.repositories.tenant import (
    ColumnRepository,
    FunctionRepository,
    IndexRepository,
    TableRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Control plane
    "BackupRepository",
    "OrganizationRepository",
    "ProjectRepository",
    "SettingRepository",
    "WorkflowExecutionRepository",
    # Tenant schema
    "ColumnRepository",
    "FunctionRepository",
    "IndexRepository",
    "TableRepository",
]
