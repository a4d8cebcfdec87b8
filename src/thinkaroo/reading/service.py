"""
Reading service: the request-side orchestration around the content cache.

    lookup -> (miss) generate -> store -> respond

The cache decides whether to reuse; this service owns the call to the
generator. Failures propagate as typed ThinkarooErrors scoped to the call.
"""

from __future__ import annotations

from typing import Protocol

from thinkaroo.cache import TimedContentCache
from thinkaroo.logging import get_logger, log_context
from thinkaroo.types import ContentCategory, ReadingContents, generate_id

logger = get_logger(__name__)


class ContentGenerator(Protocol):
    async def generate(self, category: ContentCategory) -> ReadingContents: ...


class ReadingService:
    """Serves reading contents, generating only when the current bucket is short."""

    def __init__(
        self,
        cache: TimedContentCache,
        generator: ContentGenerator,
        category: ContentCategory = ContentCategory.READING,
    ) -> None:
        self.cache = cache
        self.generator = generator
        self.category = category

    async def get_contents(self) -> ReadingContents:
        """Get reading contents for the current hour.

        Returns:
            A cached story when the hour's bucket is full, else a freshly
            generated one (which is also stored).

        Raises:
            StorageError, ObjectNotFoundError, SerializationError:
                From the cache.
            GenerationError, ConfigurationError: From the generator.
        """
        with log_context(request_id=generate_id(), category=self.category.value):
            cached = await self.cache.lookup(self.category, ReadingContents)
            if cached is not None:
                logger.info("Cache hit")
                return cached

            logger.info("Cache miss, generating")
            contents = await self.generator.generate(self.category)
            await self.cache.store(contents, self.category)
            return contents
