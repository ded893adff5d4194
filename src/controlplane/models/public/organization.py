"""Organization and membership models - ownership boundary for projects."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.controlplane.models.base import utc_now
from src.controlplane.models.enums import OrganizationRole


class Organization(SQLModel, table=True):
    __tablename__ = "organizations"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    created_at: datetime = Field(default_factory=utc_now)


class OrganizationMember(SQLModel, table=True):
    """Links a user (identified by the auth gateway) to an organization."""

    __tablename__ = "organization_members"
    __table_args__ = {"schema": "public"}

    organization_id: UUID = Field(
        foreign_key="public.organizations.id", primary_key=True, ondelete="CASCADE"
    )
    user_id: UUID = Field(primary_key=True)
    role: str = Field(default=OrganizationRole.DEVELOPER.value, max_length=20)
    created_at: datetime = Field(default_factory=utc_now)
