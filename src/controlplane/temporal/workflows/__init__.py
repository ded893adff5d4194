"""Temporal Workflows - Re-exports for worker registration."""

from src.controlplane.temporal.workflows.backup_creation import BackupCreationWorkflow
from src.controlplane.temporal.workflows.backup_deletion import BackupDeletionWorkflow
from src.controlplane.temporal.workflows.containers import (
    ContainerRemovalWorkflow,
    ContainerStartWorkflow,
)

__all__ = [
    "BackupCreationWorkflow",
    "BackupDeletionWorkflow",
    "ContainerRemovalWorkflow",
    "ContainerStartWorkflow",
]
