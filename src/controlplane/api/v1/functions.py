"""Database function endpoints."""

from fastapi import APIRouter, status

from src.controlplane.api.dependencies import CurrentProject, FunctionServiceDep, WritableProject
from src.controlplane.api.v1.params import FunctionName, SchemaName
from src.controlplane.schemas.function import Function, FunctionCreate

router = APIRouter(prefix="/functions", tags=["functions"])


@router.get("", response_model=list[Function], summary="List functions")
async def list_functions(
    project: CurrentProject, service: FunctionServiceDep, schema: SchemaName = "public"
) -> list[Function]:
    return await service.list_functions(project.db_name, schema)


@router.get(
    "/{name}",
    response_model=Function,
    summary="Get function",
    responses={404: {"description": "Function not found"}},
)
async def get_function(
    name: FunctionName,
    project: CurrentProject,
    service: FunctionServiceDep,
    schema: SchemaName = "public",
) -> Function:
    return await service.get(project.db_name, name, schema)


@router.post(
    "",
    response_model=Function,
    status_code=status.HTTP_201_CREATED,
    summary="Create or replace function",
)
async def create_function(
    request: FunctionCreate,
    project: WritableProject,
    service: FunctionServiceDep,
    schema: SchemaName = "public",
) -> Function:
    return await service.create(project.db_name, request, schema)


@router.delete(
    "/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Drop function",
    responses={404: {"description": "Function not found"}},
)
async def delete_function(
    name: FunctionName,
    project: WritableProject,
    service: FunctionServiceDep,
    schema: SchemaName = "public",
) -> None:
    await service.delete(project.db_name, name, schema)
