"""Project scoping from the X-Project header."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.controlplane.api.dependencies.auth import CurrentUserID
from src.controlplane.api.dependencies.services import ProjectServiceDep
from src.controlplane.core.logging import bind_project_context
from src.controlplane.models.public import Project


async def get_project_id_from_header(
    x_project: Annotated[str | None, Header()] = None,
) -> UUID:
    """Extract the project id from the X-Project header."""
    if not x_project:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Project header is required",
        )
    try:
        return UUID(x_project)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Project header is not a valid UUID",
        ) from e


async def get_current_project(
    project_id: Annotated[UUID, Depends(get_project_id_from_header)],
    user_id: CurrentUserID,
    service: ProjectServiceDep,
) -> Project:
    """Load the project and check the caller may use it."""
    project = await service.get_for_user(user_id, project_id)
    bind_project_context(project.id, project.db_name)
    return project


CurrentProject = Annotated[Project, Depends(get_current_project)]


async def get_writable_project(
    project_id: Annotated[UUID, Depends(get_project_id_from_header)],
    user_id: CurrentUserID,
    service: ProjectServiceDep,
) -> Project:
    """Load the project and check the caller may change it (developer and above)."""
    project = await service.get_for_writer(user_id, project_id)
    bind_project_context(project.id, project.db_name)
    return project


WritableProject = Annotated[Project, Depends(get_writable_project)]
