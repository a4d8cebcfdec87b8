"""
Object storage package.

Backends:
- S3ObjectStore (s3.py): cloud object storage
- DiskObjectStore (disk.py): local filesystem
- MemoryObjectStore (memory.py): process-local dict for tests and development

The backend is selected once at process start with create_object_store().
"""

from __future__ import annotations

from thinkaroo.config import Settings
from thinkaroo.exceptions import ConfigurationError
from thinkaroo.storage.base import ObjectStore
from thinkaroo.storage.disk import DiskObjectStore
from thinkaroo.storage.memory import MemoryObjectStore
from thinkaroo.storage.s3 import S3ObjectStore, create_s3_client


def create_object_store(settings: Settings, backend: str | None = None) -> ObjectStore:
    """Build the object store named by settings.

    Args:
        settings: Application settings.
        backend: Optional override of settings.STORAGE_BACKEND.

    Returns:
        The configured object store.

    Raises:
        ConfigurationError: If the backend name is unknown.
    """
    name = (backend or settings.STORAGE_BACKEND).lower()

    if name == "s3":
        client = create_s3_client(settings.AWS_REGION, settings.AWS_ENDPOINT_URL)
        return S3ObjectStore(client, bucket=settings.S3_BUCKET)
    if name == "disk":
        return DiskObjectStore(settings.DISK_STORAGE_DIR)
    if name == "memory":
        return MemoryObjectStore()

    raise ConfigurationError(
        f"Unknown storage backend: {name}",
        context={"expected": ["s3", "disk", "memory"]},
    )


__all__ = [
    "DiskObjectStore",
    "MemoryObjectStore",
    "ObjectStore",
    "S3ObjectStore",
    "create_object_store",
]
