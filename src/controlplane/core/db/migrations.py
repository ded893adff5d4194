"""Reusable migration runner for both production and tests."""

from alembic.config import Config

from alembic import command

ALEMBIC_INI = "alembic.ini"


def run_migrations_sync(revision: str = "head") -> None:
    """Run control-plane Alembic migrations synchronously.

    Args:
        revision: Target revision, defaults to head.
    """
    alembic_cfg = Config(ALEMBIC_INI)
    command.upgrade(alembic_cfg, revision)
