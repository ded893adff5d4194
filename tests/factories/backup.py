"""Backup factory for test data generation."""

from polyfactory import Use

from src.controlplane.models.enums import BackupStatus
from src.controlplane.models.public import Backup
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class BackupFactory(BaseFactory):
    __model__ = Backup

    id = Use(generate_uuid)
    project_id = Use(generate_uuid)
    status = BackupStatus.CREATED.value
    error = None
    started_at = Use(utc_now)
    completed_at = Use(utc_now)

    @classmethod
    def creating(cls, **kwargs):
        return cls.build(status=BackupStatus.CREATING.value, completed_at=None, **kwargs)

    @classmethod
    def deleting(cls, **kwargs):
        return cls.build(status=BackupStatus.DELETING.value, **kwargs)

    @classmethod
    def failed(cls, **kwargs):
        """A backup whose creation failed."""
        return cls.build(
            status=BackupStatus.CREATING_FAILED.value,
            error="pg_dump: error: connection refused",
            completed_at=None,
            **kwargs,
        )
