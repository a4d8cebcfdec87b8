"""
Key/value storage package.

Backends:
- DynamoKeyValueStore (dynamo.py): DynamoDB table, one item per key
- MemoryKeyValueStore (memory.py): process-local dict for tests and development
"""

from __future__ import annotations

from thinkaroo.config import Settings
from thinkaroo.exceptions import ConfigurationError
from thinkaroo.keyvalue.base import KeyValueStore
from thinkaroo.keyvalue.dynamo import DynamoKeyValueStore, create_dynamodb_client
from thinkaroo.keyvalue.memory import MemoryKeyValueStore


def create_keyvalue_store(settings: Settings, backend: str | None = None) -> KeyValueStore:
    """Build the key/value store named by settings.

    Raises:
        ConfigurationError: If the backend name is unknown.
    """
    name = (backend or settings.KEYVALUE_BACKEND).lower()

    if name == "dynamodb":
        client = create_dynamodb_client(settings.AWS_REGION, settings.AWS_ENDPOINT_URL)
        return DynamoKeyValueStore(client, table_name=settings.DYNAMODB_TABLE)
    if name == "memory":
        return MemoryKeyValueStore()

    raise ConfigurationError(
        f"Unknown key/value backend: {name}",
        context={"expected": ["dynamodb", "memory"]},
    )


__all__ = [
    "DynamoKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "create_keyvalue_store",
]
