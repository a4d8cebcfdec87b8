"""
OpenAI LLM client implementation using the AsyncOpenAI client.
"""

from __future__ import annotations

import time
from typing import Any

from openai import APIError, AsyncOpenAI, RateLimitError as OpenAIRateLimitError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from thinkaroo.llm.base import (
    AuthenticationError,
    LLMError,
    LLMRequest,
    LLMResponse,
    ModelNotFoundError,
    RateLimitError,
)
from thinkaroo.logging import get_logger

logger = get_logger(__name__)


class OpenAIClient:
    """OpenAI chat-completions client."""

    def __init__(self, api_key: str | None = None) -> None:
        """Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key. If None, uses OPENAI_API_KEY env var.
        """
        self._client = AsyncOpenAI(api_key=api_key)
        self._provider = "openai"

    @property
    def provider(self) -> str:
        """Name of this provider."""
        return self._provider

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_exponential(multiplier=1, min=1, max=60),
        stop=stop_after_attempt(5),
        reraise=True,
    )
    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Send a completion request.

        Rate limits are retried with exponential backoff; every other
        failure is raised immediately.

        Args:
            request: The LLM request.

        Returns:
            LLM response.

        Raises:
            LLMError: If the request fails.
        """
        start_time = time.monotonic()

        params: dict[str, Any] = {
            "model": request.model,
            "messages": request.messages,
            "temperature": request.temperature,
        }
        if request.max_tokens:
            params["max_tokens"] = request.max_tokens
        if request.response_format:
            params["response_format"] = request.response_format

        try:
            response = await self._client.chat.completions.create(**params)
        except OpenAIRateLimitError as e:
            retry_after = None
            if getattr(e, "response", None) is not None:
                retry_after_header = e.response.headers.get("retry-after")
                if retry_after_header:
                    retry_after = float(retry_after_header)

            logger.warning("OpenAI rate limit hit", model=request.model, retry_after=retry_after)
            raise RateLimitError(str(e), retry_after=retry_after) from e
        except APIError as e:
            error_msg = str(e)

            if "authentication" in error_msg.lower() or "api key" in error_msg.lower():
                raise AuthenticationError(f"OpenAI authentication failed: {error_msg}") from e

            if "model" in error_msg.lower() and "not found" in error_msg.lower():
                raise ModelNotFoundError(f"Model not found: {request.model}") from e

            raise LLMError(f"OpenAI API error: {error_msg}") from e

        latency_ms = int((time.monotonic() - start_time) * 1000)

        if not response.choices:
            raise LLMError("No choices in OpenAI response")

        choice = response.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self._provider,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
            finish_reason=choice.finish_reason or "stop",
            latency_ms=latency_ms,
        )

    async def close(self) -> None:
        """Close the client."""
        await self._client.close()
