"""Amazon S3 storage provider (boto3, run in worker threads)."""

import asyncio
from typing import Any

import boto3
from botocore.exceptions import ClientError

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

_ERROR_KEYS: dict[str, tuple[type[Exception], str]] = {
    "BucketAlreadyOwnedByYou": (BadRequestError, "s3.error.bucketAlreadyOwned"),
    "BucketAlreadyExists": (BadRequestError, "s3.error.bucketAlreadyExists"),
    "NoSuchBucket": (NotFoundError, "s3.error.bucketNotFound"),
    "NoSuchKey": (NotFoundError, "s3.error.fileNotFound"),
    "404": (NotFoundError, "s3.error.bucketNotFound"),
}


def _transform_error(e: ClientError, operation: str) -> Exception:
    code = e.response.get("Error", {}).get("Code", "")
    if code in _ERROR_KEYS:
        error_class, key = _ERROR_KEYS[code]
        return error_class(key)
    return StorageError(f"{operation} failed: {e}")


@register_storage_provider
class S3StorageProvider(StorageProvider):
    name = "s3"

    def __init__(self, settings: Settings, client: Any = None):
        super().__init__(settings)
        self.client = client or boto3.client(
            "s3",
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )

    async def _call(self, operation: str, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(getattr(self.client, operation), **kwargs)
        except ClientError as e:
            raise _transform_error(e, operation) from e

    async def create_container(self, name: str) -> str:
        kwargs: dict[str, Any] = {"Bucket": name}
        # us-east-1 rejects an explicit location constraint
        if self.settings.aws_region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.settings.aws_region}
        response = await self._call("create_bucket", **kwargs)

        if not await self.container_exists(name):
            raise BadRequestError("s3.error.bucketNotConfirmed")
        return response.get("Location", "")

    async def container_exists(self, name: str) -> bool:
        try:
            await self._call("head_bucket", Bucket=name)
        except (NotFoundError, BadRequestError, StorageError):
            return False
        return True

    async def list_containers(self, input: ListContainersInput) -> tuple[list[str], str]:
        kwargs: dict[str, Any] = {}
        if input.limit > 0:
            kwargs["MaxBuckets"] = input.limit
        if input.token:
            kwargs["ContinuationToken"] = input.token
        response = await self._call("list_buckets", **kwargs)
        names = [bucket["Name"] for bucket in response.get("Buckets", []) if bucket.get("Name")]
        return names, response.get("ContinuationToken", "")

    async def show_container(self, name: str) -> ContainerMetadata:
        response = await self._call("head_bucket", Bucket=name)
        return ContainerMetadata(identifier=name, name=name, region=response.get("BucketRegion"))

    async def delete_container(self, name: str) -> None:
        await self._call("delete_bucket", Bucket=name)

    async def upload_file(self, input: UploadFileInput) -> None:
        await self._call(
            "put_object", Bucket=input.container_name, Key=input.file_name, Body=input.file_bytes
        )

    async def rename_file(self, input: RenameFileInput) -> None:
        """Copy to the new key, then delete the old one."""
        await self._call(
            "copy_object",
            Bucket=input.container_name,
            CopySource={"Bucket": input.container_name, "Key": input.file_name},
            Key=input.new_file_name,
        )
        await self._call("delete_object", Bucket=input.container_name, Key=input.file_name)

    async def download_file(self, input: FileInput) -> bytes:
        response = await self._call("get_object", Bucket=input.container_name, Key=input.file_name)
        return await asyncio.to_thread(response["Body"].read)

    async def delete_file(self, input: FileInput) -> None:
        await self._call("delete_object", Bucket=input.container_name, Key=input.file_name)
