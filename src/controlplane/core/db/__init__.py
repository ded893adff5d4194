"""Database utilities - engine, session, migrations, tenant databases."""

from src.controlplane.core.db.engine import ControlPlaneDatabase, build_connect_args
from src.controlplane.core.db.migrations import run_migrations_sync
from src.controlplane.core.db.session import get_session
from src.controlplane.core.db.tenant import (
    TenantConnection,
    TenantDatabaseService,
    split_sql_statements,
)

__all__ = [
    # Engine
    "ControlPlaneDatabase",
    "build_connect_args",
    # Session
    "get_session",
    # Migrations
    "run_migrations_sync",
    # Tenant databases
    "TenantConnection",
    "TenantDatabaseService",
    "split_sql_statements",
]
