"""
S3-backed object store.

Wraps a boto3 S3 client. boto3 is blocking, so every call is pushed onto the
default executor to keep the event loop free while S3 responds.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from thinkaroo.exceptions import ObjectNotFoundError, StorageError
from thinkaroo.logging import get_logger
from thinkaroo.storage.base import ObjectStore
from thinkaroo.types import StoredObject

logger = get_logger(__name__)

S3_BUCKET_NAME = "thinkaroo-reading-stories"

_NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}

T = TypeVar("T")


class S3ObjectStore(ObjectStore):
    """Object store backed by a single S3 bucket."""

    backend_name = "s3"

    def __init__(self, client: Any, bucket: str = S3_BUCKET_NAME) -> None:
        """Initialize S3 storage.

        Args:
            client: A boto3 S3 client.
            bucket: Bucket holding all objects.
        """
        self._client = client
        self.bucket = bucket

    async def _run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(fn, *args, **kwargs))

    def _storage_error(self, e: Exception, operation: str, key: str) -> StorageError:
        return StorageError(
            f"S3 {operation} failed: {e}",
            context={"backend": self.backend_name, "bucket": self.bucket, "key": key, "operation": operation},
        )

    async def put_object(self, key: str, data: bytes) -> None:
        try:
            await self._run(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            raise self._storage_error(e, "put", key) from e

        logger.debug("Stored object in S3", key=key, size=len(data))

    def _read(self, key: str) -> bytes:
        response = self._client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()

    async def get_object(self, key: str) -> bytes:
        try:
            return await self._run(self._read, key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _NOT_FOUND_CODES:
                raise ObjectNotFoundError(
                    "Object not found",
                    context={"backend": self.backend_name, "bucket": self.bucket, "key": key},
                ) from e
            raise self._storage_error(e, "get", key) from e
        except BotoCoreError as e:
            raise self._storage_error(e, "get", key) from e

    def _list_keys(self, prefix: str) -> list[str]:
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                if obj.get("Key"):
                    keys.append(obj["Key"])
        return keys

    async def list_objects(self, prefix: str) -> list[StoredObject]:
        try:
            keys = await self._run(self._list_keys, prefix)
        except (ClientError, BotoCoreError) as e:
            raise self._storage_error(e, "list", prefix) from e

        return [StoredObject(key=key) for key in keys]


def create_s3_client(region: str | None = None, endpoint_url: str | None = None) -> Any:
    """Create a boto3 S3 client with bounded retries and timeouts.

    Args:
        region: AWS region; None uses the default credential chain's region.
        endpoint_url: Custom endpoint for S3-compatible services.

    Returns:
        A boto3 S3 client.
    """
    import boto3
    from botocore.config import Config as BotoConfig

    kwargs: dict[str, Any] = {
        "config": BotoConfig(
            retries={"max_attempts": 3},
            connect_timeout=30,
            read_timeout=30,
        )
    }
    if region:
        kwargs["region_name"] = region
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url

    return boto3.client("s3", **kwargs)
