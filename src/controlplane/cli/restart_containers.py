"""
Restart every project's PostgREST container, e.g. after a platform upgrade.

Run with:
    python -m src.controlplane.cli.restart_containers
    python -m src.controlplane.cli.restart_containers --wait   # block until each restart finishes

Each restart is a ContainerStartWorkflow with replace_existing=True: the
worker removes an existing container first, running or stopped, starts a new one and updates the
project status.
"""

import argparse
import asyncio

from temporalio.client import WorkflowFailureError

from src.controlplane.core.config import Settings, get_settings
from src.controlplane.core.db import ControlPlaneDatabase
from src.controlplane.core.logging import get_logger, setup_logging
from src.controlplane.repositories import ProjectRepository, WorkflowExecutionRepository
from src.controlplane.services.project_service import queue_container_start
from src.controlplane.services.workflow_launcher import WorkflowLauncher
from src.controlplane.temporal.client import close_temporal_client, get_temporal_client

logger = get_logger(__name__)

PAGE_SIZE = 1000


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Restart all PostgREST containers")
    parser.add_argument(
        "--wait",
        action="store_true",
        help="Wait for each restart to finish before starting the next",
    )
    parser.add_argument("--page-size", type=int, default=PAGE_SIZE)
    return parser.parse_args()


async def restart_containers(
    db: ControlPlaneDatabase,
    settings: Settings,
    *,
    wait: bool = False,
    page_size: int = PAGE_SIZE,
) -> tuple[int, int]:
    """Queue a container restart for every project with a tenant database.

    Returns:
        Tuple of (restarted, failed)
    """
    restarted = failed = 0
    async with db.session() as session:
        project_repo = ProjectRepository(session)
        launcher = WorkflowLauncher(session, WorkflowExecutionRepository(session), settings)

        cursor: str | None = None
        has_more = True
        while has_more:
            projects, cursor, has_more = await project_repo.list_all(cursor, page_size)
            for project in projects:
                if not project.db_name:
                    continue

                print(f"Restarting container for {project.db_name}...")
                workflow_id = await queue_container_start(launcher, project, replace_existing=True)
                if not wait:
                    restarted += 1
                    continue

                client = await get_temporal_client()
                try:
                    status = await client.get_workflow_handle(workflow_id).result()
                except WorkflowFailureError as e:
                    failed += 1
                    print(f"  failed: {e.cause or e}")
                    continue
                restarted += 1
                print(f"  {status}")

    return restarted, failed


async def main() -> None:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings.debug, component="cli")

    db = ControlPlaneDatabase(settings)
    db.init()
    try:
        restarted, failed = await restart_containers(
            db, settings, wait=args.wait, page_size=args.page_size
        )
    finally:
        await close_temporal_client()
        await db.dispose()

    print(f"Done: {restarted} restarted, {failed} failed")


if __name__ == "__main__":
    asyncio.run(main())
