"""
Time-bucketed generate-or-reuse content cache.

Generated artifacts are written under one prefix per category and UTC hour::

    {category-prefix}/{YYYY-MM-DD-HH}/{uuid4}.json

While the current hour's bucket holds fewer than ``capacity`` objects,
lookup() reports a miss so the caller generates fresh content and hands it
to store(). Once the bucket is full, lookup() serves a uniformly random entry
from it. Buckets are never evicted; a new hour simply starts a new bucket.

The count-then-act sequence is not atomic. Concurrent callers that all see
``capacity - 1`` entries will each generate and store, so a bucket can end up
holding more than ``capacity`` objects, bounded by the number of racing
callers. No locking is attempted.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from thinkaroo.exceptions import SerializationError
from thinkaroo.logging import get_logger
from thinkaroo.storage.base import ObjectStore
from thinkaroo.types import ContentCategory, generate_id, utc_now

logger = get_logger(__name__)

# Objects per hourly bucket before lookups stop requesting generation
MAX_OBJECTS_PER_HOUR = 16

BUCKET_TIME_FORMAT = "%Y-%m-%d-%H"

T = TypeVar("T")


@lru_cache(maxsize=64)
def _adapter(artifact_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(artifact_type)


def format_timed_prefix(dt: datetime, category: ContentCategory) -> str:
    """Format the bucket prefix for a category at a point in time.

    Args:
        dt: Datetime to bucket. Aware values are converted to UTC; naive
            values are taken to already be UTC.
        category: The content category.

    Returns:
        A prefix like ``"reading/2025-10-11-14/"``.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return f"{category.prefix}/{dt.strftime(BUCKET_TIME_FORMAT)}/"


class TimedContentCache:
    """Hourly-bucketed cache deciding between reusing and generating content.

    The cache never calls a generator itself; it only answers "serve this"
    or "go generate" and persists what the caller produced.
    """

    def __init__(
        self,
        store: ObjectStore,
        capacity: int = MAX_OBJECTS_PER_HOUR,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Object store holding the buckets. Shared, not owned.
            capacity: Entries a bucket needs before lookups serve from it.
            clock: Source of the current time (UTC).
            rng: Random source used to pick among full-bucket entries.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.object_store = store
        self.capacity = capacity
        self._clock = clock
        self._rng = rng or random.Random()

    def current_prefix(self, category: ContentCategory) -> str:
        """Prefix of the bucket for category at the current hour."""
        return format_timed_prefix(self._clock(), category)

    async def lookup(self, category: ContentCategory, artifact_type: type[T]) -> T | None:
        """Get a random cached artifact for the current hour, if the bucket is full.

        Args:
            category: The content category being requested.
            artifact_type: Type to deserialize the stored JSON into.

        Returns:
            A random artifact from the current bucket, or None when the
            bucket holds fewer than ``capacity`` entries and the caller
            should generate new content.

        Raises:
            StorageError: If listing or fetching fails.
            ObjectNotFoundError: If the chosen object vanished between list and get.
            SerializationError: If the chosen object does not decode.
        """
        prefix = self.current_prefix(category)
        objects = await self.object_store.list_objects(prefix)

        if len(objects) < self.capacity:
            logger.debug(
                "Bucket below capacity, requesting generation",
                prefix=prefix,
                count=len(objects),
                capacity=self.capacity,
            )
            return None

        chosen = self._rng.choice(objects)
        data = await self.object_store.get_object(chosen.key)

        try:
            artifact = _adapter(artifact_type).validate_json(data)
        except (ValidationError, PydanticSchemaGenerationError) as e:
            raise SerializationError(
                f"Stored artifact failed to decode: {e}",
                context={"key": chosen.key, "artifact_type": getattr(artifact_type, "__name__", str(artifact_type))},
            ) from e

        logger.debug("Serving cached artifact", key=chosen.key, count=len(objects))
        return artifact

    async def store(self, artifact: Any, category: ContentCategory) -> str:
        """Store an artifact in the current hour's bucket.

        The prefix is recomputed here, so an artifact generated just before
        an hour boundary lands in the new hour's bucket. Nothing is read
        first: the write happens even when the bucket is already full.

        Args:
            artifact: JSON-serializable value (dataclass, pydantic model, dict...).
            category: The content category being stored.

        Returns:
            The key the artifact was written to.

        Raises:
            SerializationError: If the artifact cannot be encoded as JSON.
            StorageError: If the write fails.
        """
        key = f"{self.current_prefix(category)}{generate_id()}.json"

        try:
            data = _adapter(type(artifact)).dump_json(artifact)
        except (PydanticSerializationError, PydanticSchemaGenerationError) as e:
            raise SerializationError(
                f"Artifact could not be encoded: {e}",
                context={"key": key, "artifact_type": type(artifact).__name__},
            ) from e

        await self.object_store.put_object(key, data)
        logger.info("Stored generated artifact", key=key, size=len(data))
        return key
