"""
Temporal Activities - Fine-grained operations with injected dependencies.

Activities are methods on classes constructed by the worker with the
control-plane database handle, settings and infrastructure clients.
"""

from src.controlplane.temporal.activities.backup import (
    BackupActivities,
    BackupStepInput,
    UpdateBackupStatusInput,
)
from src.controlplane.temporal.activities.project import (
    ProjectActivities,
    ProjectContainerInput,
    UpdateProjectStatusInput,
)
from src.controlplane.temporal.activities.workflow_executions import (
    UpdateWorkflowExecutionStatusInput,
    WorkflowExecutionActivities,
)
from src.controlplane.temporal.context import BackupCtx, ProjectCtx

__all__ = [
    # Context
    "BackupCtx",
    "ProjectCtx",
    # Activity classes
    "BackupActivities",
    "ProjectActivities",
    "WorkflowExecutionActivities",
    # Inputs
    "BackupStepInput",
    "ProjectContainerInput",
    "UpdateBackupStatusInput",
    "UpdateProjectStatusInput",
    "UpdateWorkflowExecutionStatusInput",
]
