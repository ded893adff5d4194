"""
Temporal Worker - Separate process from API.

Run with:
    python -m src.controlplane.temporal.worker                     # Development mode (all workloads)
    python -m src.controlplane.temporal.worker --workload project  # Container workflows only
    python -m src.controlplane.temporal.worker --workload backup   # Backup workflows only

The worker needs the docker CLI and a writable backup_tmp_dir on its host.
"""

import argparse
import asyncio
from collections.abc import Sequence

import uvicorn
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.worker import Worker

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.containers import PostgrestOrchestrator
from src.controlplane.core.db import ControlPlaneDatabase
from src.controlplane.core.logging import get_logger, setup_logging
from src.controlplane.core.process import SubprocessRunner
from src.controlplane.temporal.activities import (
    BackupActivities,
    ProjectActivities,
    WorkflowExecutionActivities,
)
from src.controlplane.temporal.routing import QueueKind, task_queue_name
from src.controlplane.temporal.workflows import (
    BackupCreationWorkflow,
    BackupDeletionWorkflow,
    ContainerRemovalWorkflow,
    ContainerStartWorkflow,
)

logger = get_logger(__name__)

WORKER_HEALTH_PORT = 8001
WORKLOADS = ("project", "backup", "all")


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for worker workload selection."""
    parser = argparse.ArgumentParser(description="Temporal worker")
    parser.add_argument(
        "--workload",
        choices=WORKLOADS,
        default="all",
        help="Worker workload type (default: all for development mode)",
    )
    return parser.parse_args()


async def create_worker(
    client: Client,
    task_queue: str,
    workflows: Sequence[type],
    activities: Sequence[object],
    *,
    max_concurrent_activities: int = 100,
    max_concurrent_workflow_tasks: int = 100,
) -> Worker:
    """Create a worker with tuned settings."""
    return Worker(
        client,
        task_queue=task_queue,
        workflows=list(workflows),
        activities=list(activities),  # type: ignore[arg-type]
        max_concurrent_activities=max_concurrent_activities,
        max_concurrent_workflow_tasks=max_concurrent_workflow_tasks,
    )


def build_activities(
    db: ControlPlaneDatabase, settings: Settings
) -> dict[QueueKind, list[object]]:
    """Construct activity instances with their dependencies, grouped by queue kind."""
    runner = SubprocessRunner()
    tracking = WorkflowExecutionActivities(db)
    project = ProjectActivities(db, PostgrestOrchestrator(settings, runner))
    backup = BackupActivities(db, settings, runner)

    return {
        QueueKind.PROJECT: [
            project.has_postgrest_container,
            project.start_postgrest_container,
            project.remove_postgrest_container,
            project.update_project_status,
            tracking.update_workflow_execution_status,
        ],
        QueueKind.BACKUP: [
            backup.dump_tenant_database,
            backup.copy_dump_to_host,
            backup.ensure_backup_container,
            backup.upload_backup,
            backup.remove_local_dump,
            backup.delete_backup_artifact,
            backup.update_backup_status,
            backup.delete_backup_record,
            tracking.update_workflow_execution_status,
        ],
    }


WORKFLOWS: dict[QueueKind, list[type]] = {
    QueueKind.PROJECT: [ContainerStartWorkflow, ContainerRemovalWorkflow],
    QueueKind.BACKUP: [BackupCreationWorkflow, BackupDeletionWorkflow],
}


def queue_kinds(workload: str) -> list[QueueKind]:
    if workload == "all":
        return [QueueKind.PROJECT, QueueKind.BACKUP]
    return [QueueKind(workload)]


async def run_workers(
    client: Client,
    settings: Settings,
    kinds: list[QueueKind],
    activities: dict[QueueKind, list[object]],
) -> None:
    """Run one worker per shard for each queue kind.

    Backup workers get lower concurrency: each backup holds a dump in memory.
    """
    workers = []
    for kind in kinds:
        concurrency = 5 if kind == QueueKind.BACKUP else 20
        for shard in range(settings.temporal_queue_shards):
            tq = task_queue_name(settings.temporal_queue_prefix, kind, shard)
            worker = await create_worker(
                client,
                tq,
                workflows=WORKFLOWS[kind],
                activities=activities[kind],
                max_concurrent_activities=concurrency,
                max_concurrent_workflow_tasks=20,
            )
            workers.append(worker)
            logger.info(f"Created {kind} worker for queue: {tq}")

    logger.info(f"Starting {len(workers)} worker(s)")
    await asyncio.gather(*(w.run() for w in workers))


async def run_health_server(
    workload: str,
    task_queues: list[str],
    port: int = WORKER_HEALTH_PORT,
) -> None:
    """Run a lightweight health server for K8s liveness checks."""
    health_app = FastAPI(title="Temporal Worker Health")

    @health_app.get("/health")
    async def health() -> dict[str, str | list[str]]:
        return {
            "status": "healthy",
            "service": "temporal-worker",
            "workload": workload,
            "task_queues": task_queues,
        }

    @health_app.get("/ready")
    async def ready() -> dict[str, str]:
        return {"status": "ready"}

    config = uvicorn.Config(health_app, host="0.0.0.0", port=port, log_level="warning")
    server = uvicorn.Server(config)
    logger.info(f"Starting health server on port {port} (workload: {workload})")
    await server.serve()


async def main() -> None:
    """Main entry point for the Temporal worker.

    The control-plane database handle is created here and injected into
    every activity class; it is disposed when the worker stops.
    """
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug, component="worker")

    db = ControlPlaneDatabase(settings)
    client = await Client.connect(settings.temporal_host, namespace=settings.temporal_namespace)

    kinds = queue_kinds(args.workload)
    task_queues = [
        task_queue_name(settings.temporal_queue_prefix, kind, shard)
        for kind in kinds
        for shard in range(settings.temporal_queue_shards)
    ]
    logger.info(f"Starting worker with workload: {args.workload}")
    logger.info(f"Polling task queues: {', '.join(task_queues)}")

    try:
        health_task = asyncio.create_task(run_health_server(args.workload, task_queues))
        await run_workers(client, settings, kinds, build_activities(db, settings))
        await health_task
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(main())
