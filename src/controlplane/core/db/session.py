"""Database session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


@asynccontextmanager
async def get_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create a control-plane session pinned to the public schema.

    Args:
        engine: The control-plane engine owned by ControlPlaneDatabase.

    Yields:
        AsyncSession bound to one pooled connection.
    """
    async with engine.connect() as connection:
        await connection.execute(text("SET search_path TO public"))
        await connection.commit()

        session_factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        async with session_factory() as session:
            yield session
