"""Lookup CLI commands.

Run the resilient lookup clients directly against the public sources.

Usage:
    recipefinder lookup chefs "ramsay" --limit 5
    recipefinder lookup dishes "creme brulee" --json
    recipefinder lookup chef-details "Gordon Ramsay"
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Callable, Dict

import typer
from rich.console import Console
from rich.table import Table

from recipefinder.configuration.settings import DEFAULT_CONFIG_PATH, resolve_settings
from recipefinder.errors import ConfigurationError, exit_code_for
from recipefinder.errors.user_messages import format_error_for_cli
from recipefinder.lookup.client import LookupOutcome, LookupReport, ResilientLookupClient
from recipefinder.lookup.wikidata import (
    WikidataChefDirectory,
    build_chef_client,
    build_cuisine_client,
    build_dish_client,
    build_ingredient_client,
)

console = Console()
lookup_app = typer.Typer(help="Query public knowledge sources for suggestions")

BUILDERS: Dict[str, Callable[..., ResilientLookupClient]] = {
    "chefs": build_chef_client,
    "dishes": build_dish_client,
    "ingredients": build_ingredient_client,
    "cuisines": build_cuisine_client,
}

_OUTCOME_STYLE = {
    LookupOutcome.SUCCESS: "green",
    LookupOutcome.CACHE_HIT: "green",
    LookupOutcome.NO_RESULT: "yellow",
    LookupOutcome.VALIDATION_SKIP: "yellow",
    LookupOutcome.CIRCUIT_OPEN: "red",
    LookupOutcome.FAILURE: "red",
}


def _load_settings(config_path: Path):
    try:
        return resolve_settings(config_path)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))


def _print_report(kind: str, report: LookupReport) -> None:
    style = _OUTCOME_STYLE.get(report.outcome, "white")
    console.print(
        f"\n[bold]{kind.title()}[/bold] for '{report.query}': "
        f"[{style}]{report.outcome.value}[/{style}] ({report.elapsed_ms}ms)"
    )
    if report.strategy:
        console.print(f"Strategy: [cyan]{report.strategy}[/cyan]")

    if report.results:
        table = Table(show_header=True)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Suggestion", style="bold")
        for i, name in enumerate(report.results, 1):
            table.add_row(str(i), name)
        console.print(table)

    if report.attempts:
        attempts = Table(title="Strategies", show_header=True)
        attempts.add_column("Strategy")
        attempts.add_column("Status")
        attempts.add_column("Error")
        for attempt in report.attempts:
            attempts.add_row(attempt.strategy, attempt.status.value, attempt.error_code or "")
        console.print(attempts)


def _run_lookup(kind: str, query: str, limit: int, output_json: bool, config_path: Path) -> None:
    settings = _load_settings(config_path)
    client = BUILDERS[kind](settings.lookup)
    report = asyncio.run(client.lookup_with_report(query, limit=limit))

    if output_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(kind, report)


@lookup_app.command("chefs")
def lookup_chefs(
    query: str = typer.Argument(..., help="Chef name or fragment"),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum number of results"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Find chefs on Wikidata."""
    _run_lookup("chefs", query, limit, output_json, config_path)


@lookup_app.command("dishes")
def lookup_dishes(
    query: str = typer.Argument(..., help="Dish name or fragment"),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum number of results"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Find dishes on Wikidata."""
    _run_lookup("dishes", query, limit, output_json, config_path)


@lookup_app.command("ingredients")
def lookup_ingredients(
    query: str = typer.Argument(..., help="Ingredient name or fragment"),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum number of results"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Find ingredients with an Open Food Facts ID on Wikidata."""
    _run_lookup("ingredients", query, limit, output_json, config_path)


@lookup_app.command("cuisines")
def lookup_cuisines(
    query: str = typer.Argument(..., help="Cuisine name or fragment"),
    limit: int = typer.Option(10, "--limit", "-l", help="Maximum number of results"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Find cuisines on Wikidata."""
    _run_lookup("cuisines", query, limit, output_json, config_path)


@lookup_app.command("chef-details")
def chef_details(
    name: str = typer.Argument(..., help="Exact chef name"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Show Wikidata facts about one chef."""
    settings = _load_settings(config_path)
    directory = WikidataChefDirectory(settings.lookup)
    details = asyncio.run(directory.get_chef_details(name))

    if details is None:
        if output_json:
            typer.echo(json.dumps({"success": False, "name": name}))
        else:
            console.print(f"[yellow]No chef found named '{name}'[/yellow]")
        raise typer.Exit(code=1)

    if output_json:
        typer.echo(json.dumps({"success": True, **details.model_dump()}, indent=2))
        return

    table = Table(title=details.label, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Description", details.description or "-")
    table.add_row("Nationality", details.nationality or "-")
    table.add_row("Born", (details.birth_date or "-")[:10])
    table.add_row("Wikidata", details.uri)
    console.print(table)
