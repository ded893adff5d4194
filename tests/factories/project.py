"""Project factory for test data generation."""

import random

from polyfactory import PostGenerated, Use

from src.controlplane.core.security import tenant_database_name
from src.controlplane.models.enums import ProjectStatus
from src.controlplane.models.public import Project
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class ProjectFactory(BaseFactory):
    """Factory for generating Project test data.

    ``db_name`` is derived from ``id`` unless given, as on project creation.
    """

    __model__ = Project

    id = Use(generate_uuid)
    organization_id = Use(generate_uuid)
    name = Use(lambda: f"Test Project {generate_uuid().hex[-8:]}")
    description = None
    db_name = PostGenerated(lambda name, values: tenant_database_name(values["id"]))
    db_port = Use(lambda: random.randint(5000, 65535))
    status = ProjectStatus.INACTIVE.value
    created_by = Use(generate_uuid)
    updated_by = None
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def active(cls, **kwargs):
        """A project whose PostgREST container is running."""
        return cls.build(status=ProjectStatus.ACTIVE.value, **kwargs)
