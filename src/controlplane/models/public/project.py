"""Project model - maps a customer project to its tenant database."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from src.controlplane.models.base import utc_now
from src.controlplane.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    """Project registry in public schema.

    db_name is assigned once at creation and never changes; it is the only
    link between a project and its tenant database.
    """

    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint("organization_id", "name", name="uq_projects_organization_name"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(foreign_key="public.organizations.id", index=True)
    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    db_name: str = Field(max_length=63, unique=True, index=True)
    db_port: int
    status: str = Field(default=ProjectStatus.INACTIVE.value, max_length=20)
    created_by: UUID | None = Field(default=None)
    updated_by: UUID | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def status_enum(self) -> ProjectStatus:
        """Get status as ProjectStatus enum."""
        return ProjectStatus(self.status)
