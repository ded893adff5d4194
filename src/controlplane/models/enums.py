"""Shared enums for models."""

from enum import Enum


class ProjectStatus(str, Enum):
    """REST-exposure state of a project's tenant database."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class BackupStatus(str, Enum):
    """Backup workflow state machine.

    creating -> created | creating_failed
    created -> deleting -> (row removed) | deleting_failed
    """

    CREATING = "creating"
    CREATED = "created"
    CREATING_FAILED = "creating_failed"
    DELETING = "deleting"
    DELETING_FAILED = "deleting_failed"


class StorageDriver(str, Enum):
    """Object-storage providers selectable through the storageDriver setting."""

    S3 = "s3"
    DROPBOX = "dropbox"
    BACKBLAZE = "backblaze"


class OrganizationRole(str, Enum):
    """Member roles, lowest to highest."""

    EXPLORER = "explorer"
    DEVELOPER = "developer"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def level(self) -> int:
        return list(OrganizationRole).index(self)

    def at_least(self, other: "OrganizationRole") -> bool:
        return self.level >= other.level
