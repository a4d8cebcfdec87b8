"""
In-memory object store for testing and development.
"""

from __future__ import annotations

import asyncio

from thinkaroo.exceptions import ObjectNotFoundError
from thinkaroo.storage.base import ObjectStore
from thinkaroo.types import StoredObject


class MemoryObjectStore(ObjectStore):
    """Process-local object store backed by a dict.

    Writes are serialized through an asyncio lock. Reads touch the mapping
    without awaiting, so they run concurrently and only ever see whole
    values.
    """

    backend_name = "memory"

    def __init__(self) -> None:
        self._objects: dict[str, bytes] = {}
        self._write_lock = asyncio.Lock()

    async def put_object(self, key: str, data: bytes) -> None:
        async with self._write_lock:
            self._objects[key] = bytes(data)

    async def get_object(self, key: str) -> bytes:
        try:
            return self._objects[key]
        except KeyError:
            raise ObjectNotFoundError(
                "Object not found", context={"backend": self.backend_name, "key": key}
            ) from None

    async def list_objects(self, prefix: str) -> list[StoredObject]:
        return [StoredObject(key=key) for key in list(self._objects) if key.startswith(prefix)]
