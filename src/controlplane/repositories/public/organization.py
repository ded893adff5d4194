"""Repository for Organization entity and membership checks."""

from uuid import UUID

from sqlmodel import select

from src.controlplane.models.public import Organization, OrganizationMember
from src.controlplane.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization

    async def get_member_role(self, organization_id: UUID, user_id: UUID) -> str | None:
        """The user's role in the organization, or None if not a member."""
        result = await self.session.execute(
            select(OrganizationMember.role).where(
                OrganizationMember.organization_id == organization_id,
                OrganizationMember.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()
