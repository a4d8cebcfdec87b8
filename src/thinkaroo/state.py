"""
Application state shared by every request.

Backends are chosen once here, from settings, and held as plain references
for the life of the process. The content cache only ever sees the
ObjectStore interface.
"""

from __future__ import annotations

from dataclasses import dataclass

from thinkaroo.cache import TimedContentCache
from thinkaroo.config import Settings
from thinkaroo.exceptions import ConfigurationError
from thinkaroo.keyvalue import KeyValueStore, create_keyvalue_store
from thinkaroo.llm import LLMClient, OpenAIClient
from thinkaroo.logging import get_logger
from thinkaroo.reading import ReadingGenerator, ReadingService
from thinkaroo.storage import ObjectStore, create_object_store

logger = get_logger(__name__)


@dataclass
class AppState:
    """Wired-up collaborators for serving content."""

    settings: Settings
    object_store: ObjectStore
    keyvalue_store: KeyValueStore
    cache: TimedContentCache
    llm_client: LLMClient | None = None

    @classmethod
    def create(
        cls,
        settings: Settings,
        storage_backend: str | None = None,
        capacity: int | None = None,
        llm_client: LLMClient | None = None,
    ) -> AppState:
        """Build state from settings.

        Args:
            settings: Application settings.
            storage_backend: Optional override of settings.STORAGE_BACKEND.
            capacity: Optional override of settings.CACHE_CAPACITY.
            llm_client: Client to use instead of building an OpenAI client.

        Raises:
            ConfigurationError: If a backend name is unknown.
        """
        object_store = create_object_store(settings, storage_backend)
        keyvalue_store = create_keyvalue_store(settings)
        cache = TimedContentCache(object_store, capacity=capacity or settings.CACHE_CAPACITY)

        if llm_client is None and settings.openai_api_key:
            llm_client = OpenAIClient(api_key=settings.openai_api_key)

        logger.info(
            "Application state initialized",
            storage=object_store.backend_name,
            keyvalue=keyvalue_store.backend_name,
            capacity=cache.capacity,
        )

        return cls(
            settings=settings,
            object_store=object_store,
            keyvalue_store=keyvalue_store,
            cache=cache,
            llm_client=llm_client,
        )

    def reading_service(self) -> ReadingService:
        """Build the reading service over this state's cache.

        Raises:
            ConfigurationError: If no LLM client is configured.
        """
        if self.llm_client is None:
            raise ConfigurationError(
                "No LLM client configured",
                context={"hint": "set OPENAI_API_KEY"},
            )
        generator = ReadingGenerator(self.llm_client, prompts_dir=self.settings.PROMPTS_DIR)
        return ReadingService(self.cache, generator)

    async def close(self) -> None:
        """Release client connections."""
        if self.llm_client is not None:
            await self.llm_client.close()
