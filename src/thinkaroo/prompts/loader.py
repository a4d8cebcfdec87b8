"""
Prompt configuration loader.

Prompts are TOML files, one per prompt, keyed by file stem::

    name = "reading_comprehension"
    description = "..."
    model = "gpt-4o-mini"
    system_context = "..."

    [prompt]
    text = "..."

The bundled prompts live in ``thinkaroo/prompts/data``. Files that fail to
parse are logged and skipped so one bad prompt cannot take the rest down.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ValidationError

from thinkaroo.exceptions import ConfigurationError
from thinkaroo.logging import get_logger

logger = get_logger(__name__)

BUNDLED_PROMPTS_DIR = Path(__file__).parent / "data"


class PromptText(BaseModel):
    """User-facing prompt body."""

    text: str


class PromptConfig(BaseModel):
    """A model + system context + prompt triple used to generate content."""

    name: str
    description: str
    model: str
    system_context: str
    prompt: PromptText


def load_prompts(directory: Path) -> dict[str, PromptConfig]:
    """Parse every ``*.toml`` file in a directory.

    Args:
        directory: Directory to scan (non-recursive).

    Returns:
        Mapping of file stem to parsed prompt config.
    """
    prompts: dict[str, PromptConfig] = {}

    if not directory.is_dir():
        logger.warning("Prompts directory missing", directory=str(directory))
        return prompts

    for path in sorted(directory.glob("*.toml")):
        try:
            with path.open("rb") as f:
                prompts[path.stem] = PromptConfig.model_validate(tomllib.load(f))
        except (tomllib.TOMLDecodeError, ValidationError, OSError) as e:
            logger.error("Failed to parse prompt file", path=str(path), error=str(e))

    return prompts


@lru_cache(maxsize=8)
def _cached_prompts(directory: Path) -> dict[str, PromptConfig]:
    return load_prompts(directory)


def prompts(directory: Path | None = None) -> dict[str, PromptConfig]:
    """Get the prompts in a directory, loading them on first use.

    Args:
        directory: Prompt directory; None uses the bundled prompts.
    """
    return _cached_prompts(Path(directory) if directory else BUNDLED_PROMPTS_DIR)


def get_prompt(name: str, directory: Path | None = None) -> PromptConfig | None:
    """Get a specific prompt by name."""
    return prompts(directory).get(name)


def require_prompt(name: str, directory: Path | None = None) -> PromptConfig:
    """Get a prompt by name, failing loudly when it is not configured.

    Raises:
        ConfigurationError: If no prompt with that name was loaded.
    """
    config = get_prompt(name, directory)
    if config is None:
        raise ConfigurationError(
            f"Prompt not found: {name}",
            context={"available": list_prompt_names(directory)},
        )
    return config


def list_prompt_names(directory: Path | None = None) -> list[str]:
    """List all available prompt names."""
    return sorted(prompts(directory))


def clear_prompt_cache() -> None:
    """Forget loaded prompts (useful for testing)."""
    _cached_prompts.cache_clear()
