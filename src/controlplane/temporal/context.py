"""
Project and backup context contracts for Temporal workflows and activities.

Context is built once by the service that starts a workflow and passed
unchanged to every activity, so no activity has to look up which tenant
database it acts on.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectCtx:
    """
    Identifies the project and its tenant database.

    Attributes:
        project_id: Project UUID (string for payload conversion), also the fairness key
        db_name: Tenant database name; container names derive from it
        db_port: Host port the PostgREST container binds, if any
    """

    project_id: str
    db_name: str
    db_port: int | None = None


@dataclass(frozen=True)
class BackupCtx:
    """Identifies one backup of one project's tenant database."""

    backup_id: str
    project: ProjectCtx

    @property
    def dump_file_name(self) -> str:
        return f"{self.backup_id}.sql"

    @property
    def artifact_key(self) -> str:
        """Object key inside the backup container: <db_name>/<backup_id>.sql"""
        return f"{self.project.db_name}/{self.dump_file_name}"
