"""Google Places usage CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from recipefinder.configuration.settings import DEFAULT_CONFIG_PATH, resolve_settings
from recipefinder.errors import ConfigurationError, UsageTrackingError, exit_code_for
from recipefinder.errors.user_messages import format_error_for_cli
from recipefinder.usage.tracker import ApiUsageTracker, MonthAnalysis

console = Console()
usage_app = typer.Typer(help="Google Places API usage accounting")


def _get_tracker(config_path: Path, stats_path: Optional[Path]) -> ApiUsageTracker:
    try:
        settings = resolve_settings(config_path)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))
    tracker = ApiUsageTracker(stats_path=stats_path, settings=settings.usage)
    tracker.initialize()
    return tracker


def _analysis_table(analysis: MonthAnalysis) -> Table:
    table = Table(title="Google Places (this month)", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Calls", str(analysis.usage))
    table.add_row("Free limit", str(analysis.limit))
    table.add_row("Remaining", str(analysis.remaining_calls))
    style = "red" if not analysis.within_free_limit else "green"
    table.add_row("Used", f"[{style}]{analysis.percentage_used}%[/{style}]")
    table.add_row("Estimated cost", f"${analysis.estimated_cost:.2f}")
    return table


@usage_app.command("show")
def show_usage(
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    stats_path: Optional[Path] = typer.Option(None, help="Usage stats file"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Show usage counters and the free-tier analysis."""
    tracker = _get_tracker(config_path, stats_path)
    stats = tracker.get_usage_stats()
    analysis = tracker.get_current_month_analysis()

    if output_json:
        payload = {
            "stats": stats.model_dump(by_alias=True),
            "currentMonth": analysis.model_dump(),
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print(_analysis_table(analysis))
    console.print(f"Total calls: {stats.google_places.total}")
    console.print(f"Last updated: {stats.last_updated}")


@usage_app.command("track")
def track_usage(
    stats_path: Optional[Path] = typer.Option(None, help="Usage stats file"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Record one Google Places API call."""
    tracker = _get_tracker(config_path, stats_path)
    try:
        analysis = tracker.track_google_places_usage(strict=True)
    except UsageTrackingError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))
    console.print(
        f"Recorded call {analysis.usage} this month "
        f"({analysis.remaining_calls} free calls remaining)"
    )
