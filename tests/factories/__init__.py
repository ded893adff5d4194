"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ProjectFactory, BackupFactory, ...
"""

from tests.factories.backup import BackupFactory
from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.organization import OrganizationFactory, OrganizationMemberFactory
from tests.factories.project import ProjectFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Organization
    "OrganizationFactory",
    "OrganizationMemberFactory",
    # Project
    "ProjectFactory",
    # Backup
    "BackupFactory",
]
