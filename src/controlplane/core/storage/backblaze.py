"""Backblaze B2 storage provider over the native v2 API."""

import hashlib
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from src.controlplane.core.config import Settings
from src.controlplane.core.exceptions import BadRequestError, NotFoundError, StorageError
from src.controlplane.core.storage.base import (
    ContainerMetadata,
    FileInput,
    ListContainersInput,
    RenameFileInput,
    StorageProvider,
    UploadFileInput,
    register_storage_provider,
)

AUTHORIZE_URL = "https://api.backblazeb2.com/b2api/v2/b2_authorize_account"


@dataclass(frozen=True)
class B2Account:
    account_id: str
    authorization_token: str
    api_url: str
    download_url: str


def _transform_error(body: str, operation: str) -> Exception:
    if "duplicate_bucket_name" in body:
        return BadRequestError("backblaze.error.bucketAlreadyExists")
    if "not_found" in body and "bucket" in body:
        return NotFoundError("backblaze.error.bucketNotFound")
    if "file_not_present" in body:
        return NotFoundError("backblaze.error.fileNotFound")
    return StorageError(f"{operation} failed: {body}")


@register_storage_provider
class BackblazeStorageProvider(StorageProvider):
    """B2 buckets as containers. Account authorization happens on first use."""

    name = "backblaze"

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(settings)
        if not settings.backblaze_key_id or not settings.backblaze_application_key:
            raise StorageError("Backblaze credentials are not set")
        self.transport = transport
        self._account: B2Account | None = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.storage_http_timeout_seconds, transport=self.transport
        )

    async def _authorize(self) -> B2Account:
        if self._account is not None:
            return self._account
        async with self._client() as client:
            response = await client.get(
                AUTHORIZE_URL,
                auth=(self.settings.backblaze_key_id or "", self.settings.backblaze_application_key or ""),
            )
        if not response.is_success:
            raise StorageError(f"b2_authorize_account failed: {response.status_code} {response.text}")
        data = response.json()
        self._account = B2Account(
            account_id=data["accountId"],
            authorization_token=data["authorizationToken"],
            api_url=data["apiUrl"],
            download_url=data["downloadUrl"],
        )
        return self._account

    async def _call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        account = await self._authorize()
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{account.api_url}/b2api/v2/{endpoint}",
                    json=payload,
                    headers={"Authorization": account.authorization_token},
                )
        except httpx.HTTPError as e:
            raise StorageError(f"{endpoint} failed: {e}") from e
        if not response.is_success:
            raise _transform_error(response.text, endpoint)
        return response.json()

    async def _bucket(self, name: str) -> dict[str, Any]:
        account = await self._authorize()
        data = await self._call(
            "b2_list_buckets", {"accountId": account.account_id, "bucketName": name}
        )
        buckets = data.get("buckets", [])
        if not buckets:
            raise NotFoundError("backblaze.error.bucketNotFound")
        return buckets[0]

    async def _file_id(self, bucket_id: str, file_name: str) -> str:
        data = await self._call(
            "b2_list_file_names",
            {"bucketId": bucket_id, "startFileName": file_name, "maxFileCount": 1},
        )
        files = data.get("files", [])
        if not files or files[0].get("fileName") != file_name:
            raise NotFoundError("backblaze.error.fileNotFound")
        return files[0]["fileId"]

    async def create_container(self, name: str) -> str:
        account = await self._authorize()
        data = await self._call(
            "b2_create_bucket",
            {"accountId": account.account_id, "bucketName": name, "bucketType": "allPrivate"},
        )
        return data["bucketId"]

    async def container_exists(self, name: str) -> bool:
        try:
            await self._bucket(name)
        except NotFoundError:
            return False
        return True

    async def list_containers(self, input: ListContainersInput) -> tuple[list[str], str]:
        account = await self._authorize()
        data = await self._call("b2_list_buckets", {"accountId": account.account_id})
        names = [bucket["bucketName"] for bucket in data.get("buckets", [])]
        if input.limit > 0:
            names = names[: input.limit]
        return names, ""

    async def show_container(self, name: str) -> ContainerMetadata:
        bucket = await self._bucket(name)
        return ContainerMetadata(identifier=bucket["bucketId"], name=bucket["bucketName"])

    async def delete_container(self, name: str) -> None:
        account = await self._authorize()
        bucket = await self._bucket(name)
        await self._call(
            "b2_delete_bucket", {"accountId": account.account_id, "bucketId": bucket["bucketId"]}
        )

    async def upload_file(self, input: UploadFileInput) -> None:
        bucket = await self._bucket(input.container_name)
        upload = await self._call("b2_get_upload_url", {"bucketId": bucket["bucketId"]})
        try:
            async with self._client() as client:
                response = await client.post(
                    upload["uploadUrl"],
                    content=input.file_bytes,
                    headers={
                        "Authorization": upload["authorizationToken"],
                        "X-Bz-File-Name": quote(input.file_name),
                        "Content-Type": "application/octet-stream",
                        "X-Bz-Content-Sha1": hashlib.sha1(input.file_bytes).hexdigest(),
                    },
                )
        except httpx.HTTPError as e:
            raise StorageError(f"b2_upload_file failed: {e}") from e
        if not response.is_success:
            raise _transform_error(response.text, "b2_upload_file")

    async def rename_file(self, input: RenameFileInput) -> None:
        """B2 has no rename: download, upload under the new name, delete the old file."""
        content = await self.download_file(FileInput(input.container_name, input.file_name))
        await self.upload_file(
            UploadFileInput(input.container_name, input.new_file_name, content)
        )
        await self.delete_file(FileInput(input.container_name, input.file_name))

    async def download_file(self, input: FileInput) -> bytes:
        account = await self._authorize()
        url = f"{account.download_url}/file/{input.container_name}/{quote(input.file_name)}"
        try:
            async with self._client() as client:
                response = await client.get(
                    url, headers={"Authorization": account.authorization_token}
                )
        except httpx.HTTPError as e:
            raise StorageError(f"download failed: {e}") from e
        if not response.is_success:
            raise _transform_error(response.text, "download")
        return response.content

    async def delete_file(self, input: FileInput) -> None:
        bucket = await self._bucket(input.container_name)
        file_id = await self._file_id(bucket["bucketId"], input.file_name)
        await self._call(
            "b2_delete_file_version", {"fileName": input.file_name, "fileId": file_id}
        )
