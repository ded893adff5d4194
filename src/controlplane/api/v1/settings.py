"""Platform settings endpoints."""

from fastapi import APIRouter

from src.controlplane.api.dependencies import CurrentUserID, SettingServiceDep
from src.controlplane.schemas.setting import StorageDriverRead, StorageDriverUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/storage-driver", response_model=StorageDriverRead, summary="Get backup storage driver")
async def get_storage_driver(_user: CurrentUserID, service: SettingServiceDep) -> StorageDriverRead:
    return await service.get_storage_driver()


@router.put("/storage-driver", response_model=StorageDriverRead, summary="Set backup storage driver")
async def set_storage_driver(
    request: StorageDriverUpdate, _user: CurrentUserID, service: SettingServiceDep
) -> StorageDriverRead:
    return await service.set_storage_driver(request.driver)
