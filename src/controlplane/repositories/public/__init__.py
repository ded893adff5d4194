"""Control-plane repositories (public schema)."""

from src.controlplane.repositories.public.backup import BackupRepository
from src.controlplane.repositories.public.organization import OrganizationRepository
from src.controlplane.repositories.public.project import ProjectRepository
from src.controlplane.repositories.public.setting import SettingRepository
from src.controlplane.repositories.public.workflow_execution import WorkflowExecutionRepository

__all__ = [
    "BackupRepository",
    "OrganizationRepository",
    "ProjectRepository",
    "SettingRepository",
    "WorkflowExecutionRepository",
]
