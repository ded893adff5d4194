"""Object storage provider contract and registry."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar

from src.controlplane.core.config import Settings


@dataclass(frozen=True)
class ListContainersInput:
    path: str = ""
    limit: int = 0
    token: str = ""


@dataclass(frozen=True)
class ContainerMetadata:
    identifier: str
    name: str = ""
    path: str = ""
    region: str | None = None


@dataclass(frozen=True)
class FileInput:
    container_name: str
    file_name: str


@dataclass(frozen=True)
class UploadFileInput:
    container_name: str
    file_name: str
    file_bytes: bytes


@dataclass(frozen=True)
class RenameFileInput:
    container_name: str
    file_name: str
    new_file_name: str


class StorageProvider(ABC):
    """One object storage backend.

    Containers are buckets (S3, Backblaze) or top-level folders (Dropbox).
    Implementations raise ``NotFoundError``/``BadRequestError`` for errors
    they can classify and ``StorageError`` for everything else.
    """

    name: str = ""

    def __init__(self, settings: Settings):
        self.settings = settings

    @abstractmethod
    async def create_container(self, name: str) -> str:
        """Create a container and return the provider's identifier for it."""

    @abstractmethod
    async def container_exists(self, name: str) -> bool: ...

    @abstractmethod
    async def list_containers(self, input: ListContainersInput) -> tuple[list[str], str]:
        """Return container names and a continuation token ("" when exhausted)."""

    @abstractmethod
    async def show_container(self, name: str) -> ContainerMetadata: ...

    @abstractmethod
    async def delete_container(self, name: str) -> None: ...

    @abstractmethod
    async def upload_file(self, input: UploadFileInput) -> None: ...

    @abstractmethod
    async def rename_file(self, input: RenameFileInput) -> None: ...

    @abstractmethod
    async def download_file(self, input: FileInput) -> bytes: ...

    @abstractmethod
    async def delete_file(self, input: FileInput) -> None: ...


ALL_STORAGE_PROVIDERS: dict[str, type[StorageProvider]] = {}


T = TypeVar("T", bound=StorageProvider)


def register_storage_provider(cls: type[T]) -> type[T]:
    """Class decorator: make a provider selectable by its ``name``."""
    if not getattr(cls, "name", None):
        raise ValueError(f"Storage provider class {cls.__name__} must define a 'name' attribute.")
    if cls.name in ALL_STORAGE_PROVIDERS:
        raise ValueError(f"Storage provider with name '{cls.name}' already registered.")
    ALL_STORAGE_PROVIDERS[cls.name] = cls
    return cls
