"""Dropbox storage provider over the v2 HTTP API.

Containers are top-level folders; files live at ``/<container>/<file>``.
Transport errors, 429 and 5xx responses are retried with exponential backoff.
"""

import json
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from src.controlplane.core.config import Settings
from src.controlplane.core.exceptions import BadRequestError, NotFoundError, StorageError
from src.controlplane.core.logging import get_logger
from src.controlplane.core.storage.base import (
    ContainerMetadata,
    FileInput,
    ListContainersInput,
    RenameFileInput,
    StorageProvider,
    UploadFileInput,
    register_storage_provider,
)

logger = get_logger(__name__)

API_BASE = "https://api.dropboxapi.com/2"
CONTENT_BASE = "https://content.dropboxapi.com/2"

# error_summary fragment -> (error class, message key)
_ERROR_KEYS: list[tuple[str, type[Exception], str]] = [
    ("path/not_found", NotFoundError, "dropbox.error.pathNotFound"),
    ("path_lookup/not_found", NotFoundError, "dropbox.error.pathNotFound"),
    ("from_lookup/not_found", NotFoundError, "dropbox.error.pathNotFound"),
    ("path/conflict", BadRequestError, "dropbox.error.pathConflict"),
    ("to/conflict", BadRequestError, "dropbox.error.pathConflict"),
    ("insufficient_space", BadRequestError, "dropbox.error.insufficientSpace"),
    ("too_many_write_operations", BadRequestError, "dropbox.error.tooManyWriteOperations"),
    ("too_many_files", BadRequestError, "dropbox.error.tooManyFiles"),
]


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429 or exc.response.status_code >= 500
    return False


@register_storage_provider
class DropboxStorageProvider(StorageProvider):
    name = "dropbox"

    max_attempts = 4  # first try plus three retries
    retry_wait = wait_exponential(multiplier=2, min=2, max=20)

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(settings)
        if not settings.dropbox_access_token:
            raise StorageError("DROPBOX_ACCESS_TOKEN is not set")
        self.access_token = settings.dropbox_access_token
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.storage_http_timeout_seconds,
            transport=self.transport,
            headers={"Authorization": f"Bearer {self.access_token}"},
        )

    async def _send(self, url: str, **kwargs: Any) -> httpx.Response:
        async with self._client() as client:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=self.retry_wait,
                retry=retry_if_exception(_is_retryable),
                reraise=True,
            ):
                with attempt:
                    response = await client.post(url, **kwargs)
                    if response.status_code == 429 or response.status_code >= 500:
                        response.raise_for_status()
        return response

    async def _request(self, operation: str, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        try:
            response = await self._send(f"{API_BASE}{endpoint}", json=payload)
        except httpx.HTTPError as e:
            raise StorageError(f"{operation} failed: {e}") from e
        self._raise_for_error(response, operation)
        return response

    async def _content_request(
        self, operation: str, endpoint: str, api_arg: dict[str, Any], body: bytes | None = None
    ) -> httpx.Response:
        headers = {
            "Content-Type": "application/octet-stream",
            "Dropbox-API-Arg": json.dumps(api_arg),
        }
        try:
            response = await self._send(f"{CONTENT_BASE}{endpoint}", headers=headers, content=body)
        except httpx.HTTPError as e:
            raise StorageError(f"{operation} failed: {e}") from e
        self._raise_for_error(response, operation)
        return response

    @staticmethod
    def _raise_for_error(response: httpx.Response, operation: str) -> None:
        if response.is_success:
            return
        body = response.text
        for fragment, error_class, key in _ERROR_KEYS:
            if fragment in body:
                raise error_class(key)
        logger.warning(
            "Dropbox request failed",
            action="storage",
            operation=operation,
            status=response.status_code,
            error=body,
        )
        raise StorageError(f"{operation} failed: {response.status_code} {body}")

    async def create_container(self, name: str) -> str:
        response = await self._request(
            "CREATE_FOLDER",
            "/files/create_folder_v2",
            {"path": normalize_path(name), "autorename": False},
        )
        return response.json().get("metadata", {}).get("id", "")

    async def container_exists(self, name: str) -> bool:
        try:
            await self.show_container(name)
        except (NotFoundError, StorageError):
            return False
        return True

    async def list_containers(self, input: ListContainersInput) -> tuple[list[str], str]:
        if input.token:
            response = await self._request(
                "LIST_FOLDERS", "/files/list_folder/continue", {"cursor": input.token}
            )
        else:
            payload: dict[str, Any] = {
                "path": input.path,
                "recursive": False,
                "include_media_info": False,
                "include_deleted": False,
                "include_has_explicit_shared_members": False,
                "include_mounted_folders": True,
            }
            if input.limit > 0:
                payload["limit"] = input.limit
            response = await self._request("LIST_FOLDERS", "/files/list_folder", payload)

        result = response.json()
        names = [
            entry["path_display"]
            for entry in result.get("entries", [])
            if entry.get(".tag") == "folder"
        ]
        cursor = result.get("cursor", "") if result.get("has_more") else ""
        return names, cursor

    async def show_container(self, name: str) -> ContainerMetadata:
        response = await self._request(
            "SHOW_FOLDER", "/files/get_metadata", {"path": normalize_path(name)}
        )
        metadata = response.json()
        if metadata.get(".tag") != "folder":
            raise StorageError(f"path is not a folder: {name}")
        return ContainerMetadata(
            identifier=metadata.get("id", ""),
            name=metadata.get("name", ""),
            path=metadata.get("path_display", ""),
        )

    async def delete_container(self, name: str) -> None:
        await self._request("DELETE_FOLDER", "/files/delete_v2", {"path": normalize_path(name)})

    async def upload_file(self, input: UploadFileInput) -> None:
        await self._content_request(
            "UPLOAD_FILE",
            "/files/upload",
            {
                "path": normalize_path(f"{input.container_name}/{input.file_name}"),
                "mode": "overwrite",
                "autorename": False,
                "mute": False,
            },
            input.file_bytes,
        )

    async def rename_file(self, input: RenameFileInput) -> None:
        await self._request(
            "RENAME_FILE",
            "/files/move_v2",
            {
                "from_path": normalize_path(f"{input.container_name}/{input.file_name}"),
                "to_path": normalize_path(f"{input.container_name}/{input.new_file_name}"),
                "allow_shared_folder": False,
                "autorename": False,
                "allow_ownership_transfer": False,
            },
        )

    async def download_file(self, input: FileInput) -> bytes:
        response = await self._content_request(
            "DOWNLOAD_FILE",
            "/files/download",
            {"path": normalize_path(f"{input.container_name}/{input.file_name}")},
        )
        return response.content

    async def delete_file(self, input: FileInput) -> None:
        await self._request(
            "DELETE_FILE",
            "/files/delete_v2",
            {"path": normalize_path(f"{input.container_name}/{input.file_name}")},
        )
