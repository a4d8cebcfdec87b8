"""
DynamoDB-backed key/value store.

Each record is one item: the key lives in the string attribute ``pk`` and
every column is a binary attribute named after the column.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from thinkaroo.exceptions import StorageError
from thinkaroo.keyvalue.base import RESERVED_COLUMN, KeyValueStore
from thinkaroo.logging import get_logger
from thinkaroo.types import Column

logger = get_logger(__name__)

DYNAMODB_TABLE_NAME = "thinkaroo-data"

PRIMARY_KEY_ATTR = RESERVED_COLUMN

T = TypeVar("T")


class DynamoKeyValueStore(KeyValueStore):
    """Key/value store backed by a DynamoDB table."""

    backend_name = "dynamodb"

    def __init__(self, client: Any, table_name: str = DYNAMODB_TABLE_NAME) -> None:
        """Initialize the store.

        Args:
            client: A boto3 DynamoDB client.
            table_name: Table whose partition key is the string attribute ``pk``.
        """
        self._client = client
        self.table_name = table_name

    async def _run(self, fn: Callable[..., T], **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(fn, **kwargs))

    def _key(self, key: str) -> dict[str, Any]:
        return {PRIMARY_KEY_ATTR: {"S": key}}

    async def put(self, key: str, columns: list[Column]) -> None:
        self.check_columns(columns)
        # Last write wins for repeated names; DynamoDB rejects overlapping paths.
        values = {column.name: column.value for column in columns}

        params: dict[str, Any] = {"TableName": self.table_name, "Key": self._key(key)}
        if values:
            names: dict[str, str] = {}
            attr_values: dict[str, Any] = {}
            assignments: list[str] = []
            for i, (name, value) in enumerate(values.items()):
                names[f"#c{i}"] = name
                attr_values[f":v{i}"] = {"B": bytes(value)}
                assignments.append(f"#c{i} = :v{i}")
            params["UpdateExpression"] = "SET " + ", ".join(assignments)
            params["ExpressionAttributeNames"] = names
            params["ExpressionAttributeValues"] = attr_values

        try:
            await self._run(self._client.update_item, **params)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"DynamoDB put failed: {e}",
                context={"backend": self.backend_name, "table": self.table_name, "key": key},
            ) from e

        logger.debug("Stored columns", key=key, columns=list(values))

    async def get(self, key: str, column_names: list[str]) -> list[Column]:
        wanted = list(dict.fromkeys(column_names))
        if not wanted:
            return []

        names = {f"#c{i}": name for i, name in enumerate(wanted)}
        try:
            result = await self._run(
                self._client.get_item,
                TableName=self.table_name,
                Key=self._key(key),
                ProjectionExpression=", ".join(names),
                ExpressionAttributeNames=names,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"DynamoDB get failed: {e}",
                context={"backend": self.backend_name, "table": self.table_name, "key": key},
            ) from e

        item = result.get("Item")
        if not item:
            return []

        columns: list[Column] = []
        for name in wanted:
            attr = item.get(name)
            if attr and "B" in attr:
                columns.append(Column(name=name, value=bytes(attr["B"])))
        return columns


def create_dynamodb_client(region: str | None = None, endpoint_url: str | None = None) -> Any:
    """Create a boto3 DynamoDB client with bounded retries and timeouts."""
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

    return boto3.client("dynamodb", **kwargs)
