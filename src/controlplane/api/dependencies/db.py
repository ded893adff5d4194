"""Control-plane database dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.controlplane.core.db import ControlPlaneDatabase


def get_database(request: Request) -> ControlPlaneDatabase:
    """The handle created in the application lifespan."""
    return request.app.state.db


Database = Annotated[ControlPlaneDatabase, Depends(get_database)]


async def get_db_session(database: Database) -> AsyncGenerator[AsyncSession]:
    """Get a control-plane session for the request."""
    async with database.session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]
