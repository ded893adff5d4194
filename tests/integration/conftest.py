"""Integration test fixtures for the control-plane and tenant databases.

These fixtures require a running PostgreSQL server reachable through
DATABASE_URL; tests are skipped when it is not. Tenant databases are
created on the same server and dropped after each test.
"""

import asyncio
from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.controlplane.core.config import Settings
from src.controlplane.core.db import ControlPlaneDatabase, TenantDatabaseService, run_migrations_sync
from src.controlplane.core.security import tenant_database_name
from src.controlplane.core.shutdown import request_tracker
from src.controlplane.models.public import Backup, Organization, Project
from tests.factories import BackupFactory, OrganizationFactory, ProjectFactory


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[ControlPlaneDatabase]:
    """Control-plane database with migrations applied."""
    db = ControlPlaneDatabase(settings)
    db.init()
    try:
        async with db.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, DBAPIError) as e:
        await db.dispose()
        pytest.skip(f"PostgreSQL not reachable: {e}")

    await asyncio.to_thread(run_migrations_sync)
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database: ControlPlaneDatabase) -> AsyncGenerator[AsyncSession]:
    """Session on the control-plane database.

    Commits are explicit; rows created through this session are cleaned up
    by the fixtures that create them.
    """
    async with database.session() as session:
        yield session


@pytest.fixture
def tenant_databases(database: ControlPlaneDatabase, settings: Settings) -> TenantDatabaseService:
    return TenantDatabaseService(database.engine, settings)


@pytest.fixture
async def tenant_db(tenant_databases: TenantDatabaseService) -> AsyncGenerator[str]:
    """An empty, unseeded tenant database."""
    name = tenant_database_name(uuid4())
    await tenant_databases.create(name)
    yield name
    await tenant_databases.drop_if_exists(name, force=True)


@pytest.fixture
async def organization(db_session: AsyncSession) -> AsyncGenerator[Organization]:
    org = OrganizationFactory.build()
    db_session.add(org)
    await db_session.commit()
    yield org
    await db_session.rollback()
    await db_session.execute(
        text("DELETE FROM public.organizations WHERE id = :id"), {"id": org.id}
    )
    await db_session.commit()


@pytest.fixture
async def project(db_session: AsyncSession, organization: Organization) -> AsyncGenerator[Project]:
    project = ProjectFactory.build(organization_id=organization.id)
    db_session.add(project)
    await db_session.commit()
    yield project
    await db_session.rollback()
    await db_session.execute(
        text("DELETE FROM public.backups WHERE project_id = :id"), {"id": project.id}
    )
    await db_session.execute(text("DELETE FROM public.projects WHERE id = :id"), {"id": project.id})
    await db_session.commit()


@pytest.fixture
async def created_backup(db_session: AsyncSession, project: Project) -> Backup:
    backup = BackupFactory.build(project_id=project.id)
    db_session.add(backup)
    await db_session.commit()
    return backup


@pytest.fixture(autouse=True)
def _reset_request_tracker():
    request_tracker.reset()
    yield
    request_tracker.reset()
