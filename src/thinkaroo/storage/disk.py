"""
Local filesystem object store.

Keys map onto paths under a base directory: ``reading/2025-10-11-14/x.json``
is stored at ``{base}/reading/2025-10-11-14/x.json``.
"""

from __future__ import annotations

from pathlib import Path

from thinkaroo.exceptions import ObjectNotFoundError, StorageError
from thinkaroo.logging import get_logger
from thinkaroo.storage.base import ObjectStore
from thinkaroo.types import StoredObject

logger = get_logger(__name__)

DISK_STORAGE_BASE = Path("./storage")


class DiskObjectStore(ObjectStore):
    """Object store that writes each object to its own file."""

    backend_name = "disk"

    def __init__(self, base_path: str | Path = DISK_STORAGE_BASE) -> None:
        """Initialize disk storage.

        Args:
            base_path: Root directory all keys are resolved against.
        """
        self.base_path = Path(base_path)

    def _key_to_path(self, key: str) -> Path:
        """Convert a storage key to a file path under the base directory."""
        path = self.base_path / key
        root = self.base_path.resolve()
        resolved = path.resolve()
        if resolved != root and root not in resolved.parents:
            raise StorageError(
                "Key escapes storage root",
                context={"backend": self.backend_name, "key": key},
            )
        return path

    def _path_to_key(self, path: Path) -> str:
        """Convert a file path back to a forward-slash storage key."""
        return path.relative_to(self.base_path).as_posix()

    async def put_object(self, key: str, data: bytes) -> None:
        file_path = self._key_to_path(key)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
        except OSError as e:
            raise StorageError(
                f"Failed to write object: {e}",
                context={"backend": self.backend_name, "key": key, "operation": "put"},
            ) from e

        logger.debug("Stored object", key=key, size=len(data))

    async def get_object(self, key: str) -> bytes:
        file_path = self._key_to_path(key)
        try:
            return file_path.read_bytes()
        except FileNotFoundError:
            raise ObjectNotFoundError(
                "Object not found", context={"backend": self.backend_name, "key": key}
            ) from None
        except OSError as e:
            raise StorageError(
                f"Failed to read object: {e}",
                context={"backend": self.backend_name, "key": key, "operation": "get"},
            ) from e

    async def list_objects(self, prefix: str) -> list[StoredObject]:
        search_path = self._key_to_path(prefix)

        if not search_path.exists():
            return []

        if search_path.is_file():
            return [StoredObject(key=self._path_to_key(search_path))]

        try:
            return [
                StoredObject(key=self._path_to_key(path))
                for path in search_path.rglob("*")
                if path.is_file()
            ]
        except OSError as e:
            raise StorageError(
                f"Failed to list objects: {e}",
                context={"backend": self.backend_name, "prefix": prefix, "operation": "list"},
            ) from e
