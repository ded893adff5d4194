"""Shared workflow step utilities."""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from src.controlplane.temporal.activities import (
        UpdateWorkflowExecutionStatusInput,
        WorkflowExecutionActivities,
    )


def short_activity_opts() -> dict[str, object]:
    """Options for quick activities (status updates, container checks)."""
    return {
        "start_to_close_timeout": timedelta(seconds=30),
        "retry_policy": RetryPolicy(
            maximum_attempts=3,
            initial_interval=timedelta(seconds=1),
        ),
    }


def medium_activity_opts() -> dict[str, object]:
    """Options for idempotent external calls (storage deletes)."""
    return {
        "start_to_close_timeout": timedelta(seconds=120),
        "retry_policy": RetryPolicy(
            maximum_attempts=3,
            initial_interval=timedelta(seconds=2),
        ),
    }


def single_attempt_opts() -> dict[str, object]:
    """Options for pipeline steps that must not be retried (dump, copy, upload, container run)."""
    return {
        "start_to_close_timeout": timedelta(minutes=30),
        "retry_policy": RetryPolicy(maximum_attempts=1),
    }


async def record_execution_status(status: str, error_message: str | None = None) -> None:
    """Update the workflow_executions row of the running workflow."""
    await workflow.execute_activity_method(
        WorkflowExecutionActivities.update_workflow_execution_status,
        UpdateWorkflowExecutionStatusInput(
            workflow_id=workflow.info().workflow_id,
            status=status,
            error_message=error_message,
        ),
        **short_activity_opts(),  # type: ignore[arg-type]
    )


def failure_message(error: BaseException) -> str:
    """The innermost cause's message, e.g. the stderr of a failed docker command."""
    while error.__cause__ is not None:
        error = error.__cause__
    return str(error)
