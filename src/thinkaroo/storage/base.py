"""
Base class for object storage.

Every backend implements the same three operations so callers never need to
know which one is active:
- put_object: write (or overwrite) the bytes at a key
- get_object: read the full object, ObjectNotFoundError if absent
- list_objects: descriptors of every object under a prefix, in no particular order
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from thinkaroo.types import StoredObject


class ObjectStore(ABC):
    """Abstract interface for blob storage backends."""

    backend_name: str = "abstract"

    @abstractmethod
    async def put_object(self, key: str, data: bytes) -> None:
        """Store an object at the given key.

        Args:
            key: The key/path for the object.
            data: The raw bytes to store.

        Raises:
            StorageError: If the backend write fails.
        """
        ...

    @abstractmethod
    async def get_object(self, key: str) -> bytes:
        """Retrieve an object by its key.

        Args:
            key: The key/path of the object to retrieve.

        Returns:
            The raw bytes of the object.

        Raises:
            ObjectNotFoundError: If nothing was ever written at the key.
            StorageError: If the backend read fails.
        """
        ...

    @abstractmethod
    async def list_objects(self, prefix: str) -> list[StoredObject]:
        """List all objects under the prefix.

        Memory and S3 match any key that starts with the prefix. The disk
        backend walks the directory the prefix names, so a prefix must end
        on a path segment boundary (``"reading/2025-10-11-14/"``, not
        ``"reading/2025-10-11-1"``) to list the same keys everywhere.

        Args:
            prefix: The prefix to filter objects by.

        Returns:
            Matching objects; empty when nothing matches.

        Raises:
            StorageError: If listing fails.
        """
        ...
