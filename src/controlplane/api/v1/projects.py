"""Project endpoints - each project is one tenant database plus its PostgREST container."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.controlplane.api.dependencies import CurrentUserID, ProjectServiceDep
from src.controlplane.schemas.pagination import PaginatedResponse
from src.controlplane.schemas.project import (
    ProjectCreate,
    ProjectDeleteResponse,
    ProjectRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=PaginatedResponse[ProjectRead],
    summary="List projects",
    responses={
        200: {"description": "Paginated list of projects"},
        403: {"description": "Not a member of the organization"},
    },
)
async def list_projects(
    user_id: CurrentUserID,
    service: ProjectServiceDep,
    organization_id: Annotated[UUID, Query(description="Owning organization")],
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ProjectRead]:
    """List an organization's projects, newest first."""
    projects, next_cursor, has_more = await service.list_projects(
        user_id, organization_id, cursor, limit
    )
    return PaginatedResponse(
        items=[ProjectRead.model_validate(p) for p in projects],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={
        200: {"description": "Project details"},
        404: {"description": "Project not found"},
    },
)
async def get_project(
    project_id: UUID, user_id: CurrentUserID, service: ProjectServiceDep
) -> ProjectRead:
    project = await service.get_for_user(user_id, project_id)
    return ProjectRead.model_validate(project)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description=(
        "Create the project and its tenant database. The PostgREST container "
        "starts in the background; the project reports `inactive` until it is up."
    ),
    responses={
        201: {"description": "Project created"},
        403: {"description": "Not allowed to create projects in the organization"},
        422: {"description": "Project with this name already exists"},
    },
)
async def create_project(
    request: ProjectCreate, user_id: CurrentUserID, service: ProjectServiceDep
) -> ProjectRead:
    project = await service.create(user_id, request)
    return ProjectRead.model_validate(project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={
        200: {"description": "Project updated"},
        404: {"description": "Project not found"},
        422: {"description": "Project with this name already exists"},
    },
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    user_id: CurrentUserID,
    service: ProjectServiceDep,
) -> ProjectRead:
    project = await service.get_for_user(user_id, project_id)
    project = await service.update(user_id, project, request)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    response_model=ProjectDeleteResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete project",
    description="Drops the tenant database immediately; the container is removed in the background.",
    responses={
        202: {"description": "Project deleted, container removal started"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID, user_id: CurrentUserID, service: ProjectServiceDep
) -> ProjectDeleteResponse:
    project = await service.get_for_user(user_id, project_id)
    workflow_id = await service.delete(user_id, project)
    return ProjectDeleteResponse(id=project_id, workflow_id=workflow_id)
