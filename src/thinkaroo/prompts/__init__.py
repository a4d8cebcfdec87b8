"""
Prompt configuration package.
"""

from thinkaroo.prompts.loader import (
    BUNDLED_PROMPTS_DIR,
    PromptConfig,
    PromptText,
    clear_prompt_cache,
    get_prompt,
    list_prompt_names,
    load_prompts,
    prompts,
    require_prompt,
)

__all__ = [
    "BUNDLED_PROMPTS_DIR",
    "PromptConfig",
    "PromptText",
    "clear_prompt_cache",
    "get_prompt",
    "list_prompt_names",
    "load_prompts",
    "prompts",
    "require_prompt",
]
