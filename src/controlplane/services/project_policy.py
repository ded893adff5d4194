"""Organization-membership authorization for projects."""

from uuid import UUID

from src.controlplane.models.enums import OrganizationRole
from src.controlplane.repositories import OrganizationRepository


class ProjectPolicy:
    """Members may read; developers and above may create, update and delete."""

    def __init__(self, organization_repo: OrganizationRepository):
        self.organization_repo = organization_repo

    async def _role(self, organization_id: UUID, user_id: UUID) -> OrganizationRole | None:
        role = await self.organization_repo.get_member_role(organization_id, user_id)
        return OrganizationRole(role) if role is not None else None

    async def can_access(self, user_id: UUID, organization_id: UUID) -> bool:
        return await self._role(organization_id, user_id) is not None

    async def can_create(self, user_id: UUID, organization_id: UUID) -> bool:
        role = await self._role(organization_id, user_id)
        return role is not None and role.at_least(OrganizationRole.DEVELOPER)

    async def can_update(self, user_id: UUID, organization_id: UUID) -> bool:
        return await self.can_create(user_id, organization_id)
