"""Project lifecycle: tenant database, PostgREST container and the registry row."""

import random
from uuid import UUID, uuid4

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.controlplane.core.db.tenant import TenantDatabaseService
from src.controlplane.core.exceptions import ForbiddenError, NotFoundError, UnprocessableError
from src.controlplane.core.logging import get_logger
from src.controlplane.core.security import tenant_database_name
from src.controlplane.models.base import utc_now
from src.controlplane.models.public import Project, ProjectStatus
from src.controlplane.repositories import ProjectRepository
from src.controlplane.schemas.project import ProjectCreate, ProjectUpdate
from src.controlplane.services.project_policy import ProjectPolicy
from src.controlplane.services.workflow_launcher import WorkflowLauncher, unique_workflow_id
from src.controlplane.temporal.context import ProjectCtx
from src.controlplane.temporal.routing import QueueKind
from src.controlplane.temporal.workflows import ContainerRemovalWorkflow, ContainerStartWorkflow

logger = get_logger(__name__)

DB_PORT_RANGE = (5000, 65535)


def project_ctx(project: Project) -> ProjectCtx:
    return ProjectCtx(project_id=str(project.id), db_name=project.db_name, db_port=project.db_port)


async def queue_container_start(
    launcher: WorkflowLauncher, project: Project, replace_existing: bool = False
) -> str:
    """Queue a PostgREST container start, replacing a running one if asked.

    Returns:
        The container start workflow id
    """
    return await launcher.start(
        ContainerStartWorkflow.run,
        [project_ctx(project), replace_existing],
        workflow_id=unique_workflow_id("container-start", project.db_name),
        workflow_type="ContainerStartWorkflow",
        entity_type="project",
        entity_id=project.id,
        project_id=project.id,
        kind=QueueKind.PROJECT,
    )


class ProjectService:
    """Project lifecycle service - business logic only."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        policy: ProjectPolicy,
        database_service: TenantDatabaseService,
        launcher: WorkflowLauncher,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.policy = policy
        self.database_service = database_service
        self.launcher = launcher
        self.session = session

    async def get_for_user(self, user_id: UUID, project_id: UUID) -> Project:
        """Load a project the user may read.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the user is not a member of its organization
        """
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("project.error.notFound")
        if not await self.policy.can_access(user_id, project.organization_id):
            raise ForbiddenError("project.error.accessForbidden")
        return project

    async def get_for_writer(self, user_id: UUID, project_id: UUID) -> Project:
        """Load a project the user may change: its schema, rows or backups.

        Raises:
            NotFoundError: If the project does not exist
            ForbiddenError: If the user is not a member, or ranks below developer
        """
        project = await self.get_for_user(user_id, project_id)
        if not await self.policy.can_update(user_id, project.organization_id):
            raise ForbiddenError("project.error.updateForbidden")
        return project

    async def list_projects(
        self, user_id: UUID, organization_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[Project], str | None, bool]:
        """List an organization's projects with cursor-based pagination.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        if not await self.policy.can_access(user_id, organization_id):
            raise ForbiddenError("project.error.listForbidden")
        return await self.project_repo.list_for_organization(organization_id, cursor, limit)

    async def create(self, user_id: UUID, data: ProjectCreate) -> Project:
        """
        Create the tenant database, register the project and queue its container start.

        The database is created and seeded with the creator as owner before
        the project row is written, so a visible project always has a live
        database. If the row cannot be written the database is dropped again.
        The container start runs on the worker; the project stays
        ``inactive`` until it finishes.

        Raises:
            ForbiddenError: If the user may not create projects in the organization
            UnprocessableError: If the organization already has a project with this name
        """
        if not await self.policy.can_create(user_id, data.organization_id):
            raise ForbiddenError("project.error.createForbidden")
        if await self.project_repo.exists_by_name_for_organization(data.name, data.organization_id):
            raise UnprocessableError("project.error.duplicateName")

        project_id = uuid4()
        project = Project(
            id=project_id,
            organization_id=data.organization_id,
            name=data.name,
            description=data.description,
            db_name=tenant_database_name(project_id),
            db_port=random.randint(*DB_PORT_RANGE),
            status=ProjectStatus.INACTIVE.value,
            created_by=user_id,
            updated_by=user_id,
        )
        try:
            await self.database_service.create(project.db_name, owner_id=str(user_id))
        except DBAPIError as e:
            logger.error(
                "Tenant database creation failed",
                action="database",
                db=project.db_name,
                error=str(e.orig),
            )
            raise

        try:
            self.project_repo.add(project)
            await self.session.commit()
            await self.session.refresh(project)
        except IntegrityError as e:
            await self.session.rollback()
            await self.database_service.drop_if_exists(project.db_name, force=True)
            raise UnprocessableError("project.error.duplicateName") from e

        await queue_container_start(self.launcher, project)
        return project

    async def update(self, user_id: UUID, project: Project, data: ProjectUpdate) -> Project:
        if not await self.policy.can_update(user_id, project.organization_id):
            raise ForbiddenError("project.error.updateForbidden")

        update_data = data.model_dump(exclude_unset=True)
        name = update_data.get("name")
        if name and name != project.name:
            if await self.project_repo.exists_by_name_for_organization(
                name, project.organization_id
            ):
                raise UnprocessableError("project.error.duplicateName")

        for field, value in update_data.items():
            setattr(project, field, value)
        project.updated_by = user_id
        project.updated_at = utc_now()
        await self.session.commit()
        await self.session.refresh(project)
        return project

    async def delete(self, user_id: UUID, project: Project) -> str:
        """
        Drop the tenant database, delete the project and queue container removal.

        The drop is forced because the PostgREST container still holds
        connections to the database.

        Returns:
            The container removal workflow id
        """
        if not await self.policy.can_update(user_id, project.organization_id):
            raise ForbiddenError("project.error.updateForbidden")

        ctx = project_ctx(project)
        await self.database_service.drop_if_exists(project.db_name, force=True)
        await self.project_repo.delete(project)
        await self.session.commit()
        logger.info("Project deleted", action="database", db=ctx.db_name)

        return await self.launcher.start(
            ContainerRemovalWorkflow.run,
            [ctx],
            workflow_id=unique_workflow_id("container-remove", ctx.db_name),
            workflow_type="ContainerRemovalWorkflow",
            entity_type="project",
            entity_id=project.id,
            project_id=project.id,
            kind=QueueKind.PROJECT,
        )

