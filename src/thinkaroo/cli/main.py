"""
CLI for the thinkaroo content service.

Commands:
    thinkaroo reading - Serve one reading through the cache (generating on a miss)
    thinkaroo prompts - List loaded prompt configurations
    thinkaroo config - Show current configuration
    thinkaroo version - Print version
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import asdict
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from thinkaroo import __version__
from thinkaroo.config import Settings, clear_settings_cache, get_settings
from thinkaroo.exceptions import ThinkarooError
from thinkaroo.logging import setup_logging
from thinkaroo.prompts import prompts as load_prompt_map
from thinkaroo.state import AppState
from thinkaroo.types import ReadingContents

app = typer.Typer(
    name="thinkaroo",
    help="Thinkaroo - cached LLM reading content",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        error_console.print(f"[red]Invalid configuration:[/red] {e}")
        return None


async def _serve_reading(state: AppState) -> ReadingContents:
    try:
        return await state.reading_service().get_contents()
    finally:
        await state.close()


@app.command()
def reading(
    backend: Annotated[
        Optional[str],
        typer.Option("--backend", "-b", help="Storage backend: s3, disk or memory"),
    ] = None,
    capacity: Annotated[
        Optional[int],
        typer.Option("--capacity", "-c", min=1, help="Artifacts per hourly bucket"),
    ] = None,
) -> None:
    """Serve one reading, generating and storing it if the bucket is short."""
    settings = _get_settings_safe()
    if settings is None:
        raise typer.Exit(1)

    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    try:
        state = AppState.create(settings, storage_backend=backend, capacity=capacity)
        contents = asyncio.run(_serve_reading(state))
    except ThinkarooError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print_json(json.dumps(asdict(contents)))


@app.command(name="prompts")
def list_prompts() -> None:
    """List the prompt configurations that were loaded."""
    settings = _get_settings_safe()
    if settings is None:
        raise typer.Exit(1)

    loaded = load_prompt_map(settings.PROMPTS_DIR)
    if not loaded:
        console.print("[yellow]No prompts loaded.[/yellow]")
        return

    table = Table(title="Prompts", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Model", style="green")
    table.add_column("Description")

    for name, prompt in sorted(loaded.items()):
        table.add_row(name, prompt.model, prompt.description)

    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration with API keys redacted."""
    settings = _get_settings_safe()
    if settings is None:
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"thinkaroo version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
