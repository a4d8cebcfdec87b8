"""
Reading content generator.

Turns a category's prompt configuration into an LLM request and parses the
JSON answer into ReadingContents. Any failure along the way surfaces as a
GenerationError, except a missing prompt which is a ConfigurationError.
"""

from __future__ import annotations

from pathlib import Path

import orjson
from pydantic import TypeAdapter, ValidationError

from thinkaroo.exceptions import GenerationError
from thinkaroo.llm.base import LLMClient, LLMError, LLMRequest
from thinkaroo.logging import get_logger
from thinkaroo.prompts import require_prompt
from thinkaroo.types import ContentCategory, ReadingContents

logger = get_logger(__name__)

_reading_adapter = TypeAdapter(ReadingContents)


class ReadingGenerator:
    """Generates ReadingContents with an LLM client."""

    def __init__(
        self,
        client: LLMClient,
        prompts_dir: Path | None = None,
        temperature: float = 0.9,
    ) -> None:
        self._client = client
        self._prompts_dir = prompts_dir
        self._temperature = temperature

    async def generate(self, category: ContentCategory = ContentCategory.READING) -> ReadingContents:
        """Generate a new reading story.

        Raises:
            ConfigurationError: If the category's prompt is not configured.
            GenerationError: If the LLM call fails or returns unusable content.
        """
        prompt_config = require_prompt(category.prompt_name, self._prompts_dir)
        context = {"category": category.value, "model": prompt_config.model}

        request = LLMRequest(
            messages=[
                {"role": "system", "content": prompt_config.system_context},
                {"role": "user", "content": prompt_config.prompt.text},
            ],
            model=prompt_config.model,
            temperature=self._temperature,
            response_format={"type": "json_object"},
        )

        try:
            response = await self._client.complete(request)
        except LLMError as e:
            raise GenerationError(f"LLM call failed: {e}", context=context) from e

        if not response.content.strip():
            raise GenerationError("No content in LLM response", context=context)

        try:
            contents = _reading_adapter.validate_python(orjson.loads(response.content))
        except orjson.JSONDecodeError as e:
            raise GenerationError(f"LLM response is not valid JSON: {e}", context=context) from e
        except ValidationError as e:
            raise GenerationError(
                f"LLM response does not match ReadingContents: {e.error_count()} error(s)",
                context=context,
            ) from e

        logger.info(
            "Generated reading",
            title=contents.title,
            questions=len(contents.questions),
            tokens=response.total_tokens,
            latency_ms=response.latency_ms,
        )
        return contents
