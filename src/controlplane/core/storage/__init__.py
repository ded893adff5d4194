"""Pluggable object storage providers."""

from src.controlplane.core.storage.base import (
    ALL_STORAGE_PROVIDERS,
    ContainerMetadata,
    FileInput,
    ListContainersInput,
    RenameFileInput,
    StorageProvider,
    UploadFileInput,
    register_storage_provider,
)
from src.controlplane.core.storage.factory import get_storage_provider, resolve_storage_driver

__all__ = [
    "ALL_STORAGE_PROVIDERS",
    "ContainerMetadata",
    "FileInput",
    "ListContainersInput",
    "RenameFileInput",
    "StorageProvider",
    "UploadFileInput",
    "get_storage_provider",
    "register_storage_provider",
    "resolve_storage_driver",
]
