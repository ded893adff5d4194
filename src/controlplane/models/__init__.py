"""Model exports.

Import from here: `from src.controlplane.models import Project, Backup`
"""

from src.controlplane.models.enums import (
    BackupStatus,
    OrganizationRole,
    ProjectStatus,
    StorageDriver,
)
from src.controlplane.models.public import (
    STORAGE_DRIVER_SETTING,
    Backup,
    Organization,
    OrganizationMember,
    Project,
    Setting,
    WorkflowExecution,
)

__all__ = [
    # Enums
    "BackupStatus",
    "OrganizationRole",
    "ProjectStatus",
    "StorageDriver",
    # Models
    "Backup",
    "Organization",
    "OrganizationMember",
    "Project",
    "STORAGE_DRIVER_SETTING",
    "Setting",
    "WorkflowExecution",
]
