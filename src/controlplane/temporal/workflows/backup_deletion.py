"""
Backup Deletion Workflow.

Deletes the stored artifact, then the backup row. If the artifact cannot
be deleted the row stays, marked deleting_failed with the error.
"""

from temporalio import workflow
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from src.controlplane.models.enums import BackupStatus
    from src.controlplane.temporal.activities import (
        BackupActivities,
        BackupCtx,
        BackupStepInput,
        UpdateBackupStatusInput,
    )
    from src.controlplane.temporal.workflows._steps.common import (
        failure_message,
        medium_activity_opts,
        record_execution_status,
        short_activity_opts,
    )


@workflow.defn
class BackupDeletionWorkflow:
    @workflow.run
    async def run(self, ctx: BackupCtx) -> str:
        step_input = BackupStepInput(ctx=ctx)
        try:
            # A missing artifact counts as deleted, so retries are safe
            await workflow.execute_activity_method(
                BackupActivities.delete_backup_artifact,
                step_input,
                **medium_activity_opts(),  # type: ignore[arg-type]
            )
            await workflow.execute_activity_method(
                BackupActivities.delete_backup_record,
                step_input,
                **short_activity_opts(),  # type: ignore[arg-type]
            )
        except ActivityError as e:
            error = failure_message(e)
            workflow.logger.error(
                "Backup deletion failed",
                extra={
                    "action": "backup",
                    "db": ctx.project.db_name,
                    "backup_uuid": ctx.backup_id,
                    "error": error,
                },
            )
            await workflow.execute_activity_method(
                BackupActivities.update_backup_status,
                UpdateBackupStatusInput(
                    backup_id=ctx.backup_id,
                    status=BackupStatus.DELETING_FAILED.value,
                    error=error,
                    db_name=ctx.project.db_name,
                ),
                **short_activity_opts(),  # type: ignore[arg-type]
            )
            await record_execution_status("failed", error)
            raise

        await record_execution_status("completed")
        workflow.logger.info(f"Backup {ctx.backup_id} deleted")
        return ctx.backup_id
