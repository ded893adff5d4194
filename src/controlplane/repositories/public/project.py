"""Repository for Project entity."""

from uuid import UUID

from sqlmodel import select

from src.controlplane.models.public import Project
from src.controlplane.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity in public schema.

    The only writer of the project -> tenant database name mapping.
    """

    model = Project

    async def get_db_name_by_id(self, project_id: UUID) -> str | None:
        """Resolve a project to its tenant database name."""
        result = await self.session.execute(
            select(Project.db_name).where(Project.id == project_id)
        )
        return result.scalar_one_or_none()

    async def exists_by_name_for_organization(self, name: str, organization_id: UUID) -> bool:
        """Check if the organization already has a project with this name."""
        result = await self.session.execute(
            select(Project.id).where(
                Project.organization_id == organization_id,
                Project.name == name,
            )
        )
        return result.first() is not None

    async def list_for_organization(
        self, organization_id: UUID, cursor: str | None, limit: int
    ) -> tuple[list[Project], str | None, bool]:
        query = select(Project).where(Project.organization_id == organization_id)
        return await self.paginate(query, cursor, limit)

    async def list_all(
        self, cursor: str | None, limit: int
    ) -> tuple[list[Project], str | None, bool]:
        """List every project across organizations (operator tooling)."""
        return await self.paginate(select(Project), cursor, limit)
