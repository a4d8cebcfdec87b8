"""
LLM client package.
"""

from thinkaroo.llm.base import (
    AuthenticationError,
    LLMClient,
    LLMError,
    LLMRequest,
    LLMResponse,
    ModelNotFoundError,
    RateLimitError,
)
from thinkaroo.llm.openai_client import OpenAIClient

__all__ = [
    "AuthenticationError",
    "LLMClient",
    "LLMError",
    "LLMRequest",
    "LLMResponse",
    "ModelNotFoundError",
    "OpenAIClient",
    "RateLimitError",
]
