"""Control-plane models, all in the public schema."""

from src.controlplane.models.enums import (
    BackupStatus,
    OrganizationRole,
    ProjectStatus,
    StorageDriver,
)
from src.controlplane.models.public.backup import Backup
from src.controlplane.models.public.organization import Organization, OrganizationMember
from src.controlplane.models.public.project import Project
from src.controlplane.models.public.setting import STORAGE_DRIVER_SETTING, Setting
from src.controlplane.models.public.workflow import WorkflowExecution

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
