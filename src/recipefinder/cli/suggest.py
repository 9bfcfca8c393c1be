"""Suggestion CLI command.

Usage:
    recipefinder suggest chef "ramsay"
    recipefinder suggest dish "ratatouille" --enhanced --json
    recipefinder suggest cuisine
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console

from recipefinder.configuration.settings import DEFAULT_CONFIG_PATH, resolve_settings
from recipefinder.errors import ConfigurationError, exit_code_for
from recipefinder.errors.user_messages import format_error_for_cli
from recipefinder.lookup.suggestions import SuggestionKind, build_default_service

console = Console()


def suggest_command(
    kind: SuggestionKind = typer.Argument(..., help="What to suggest"),
    query: str = typer.Argument("", help="Text typed so far"),
    enhanced: bool = typer.Option(False, "--enhanced", "-e", help="Include remote sources"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Suggest chefs, dishes, ingredients, cuisines or restaurants."""
    try:
        settings = resolve_settings(config_path)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))

    service = build_default_service(settings.lookup)
    try:
        if enhanced:
            result = asyncio.run(service.enhanced(kind.value, query))
        else:
            result = service.suggest(kind.value, query)
    except ValueError as e:
        if output_json:
            typer.echo(json.dumps({"success": False, "error": str(e)}))
        else:
            typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    if output_json:
        typer.echo(json.dumps({"success": True, **result.model_dump()}, indent=2))
        return

    console.print(f"\n[bold]{kind.value.title()} suggestions[/bold] [dim]({result.source})[/dim]")
    if not result.suggestions:
        console.print("[yellow]No suggestions[/yellow]")
    for i, name in enumerate(result.suggestions, 1):
        console.print(f"  {i}. {name}")
    if result.has_more_results and not enhanced:
        console.print("[dim]Try --enhanced for more options[/dim]")
