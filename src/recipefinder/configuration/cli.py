"""CLI commands for managing RecipeFinder settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import BaseModel, ValidationError

from recipefinder.configuration.settings import (
    DEFAULT_CONFIG_PATH,
    Settings,
    bootstrap_settings,
    load_settings,
    save_settings,
)
from recipefinder.errors import ConfigurationError, exit_code_for
from recipefinder.errors.user_messages import format_error_for_cli


config_app = typer.Typer(help="Manage RecipeFinder configuration")


@config_app.command("init")
def init_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config file"),
    cache_ttl: Optional[float] = typer.Option(None, help="Override cache TTL in seconds"),
    max_failures: Optional[int] = typer.Option(None, help="Override circuit breaker threshold"),
    timeout: Optional[float] = typer.Option(None, help="Override per-call timeout in seconds"),
    usage_stats_path: Optional[Path] = typer.Option(None, help="Override usage stats file"),
) -> None:
    """Initialize the RecipeFinder settings file."""

    overrides = {}
    if cache_ttl is not None:
        overrides.setdefault("lookup", {})["cache_ttl_seconds"] = cache_ttl
    if max_failures is not None:
        overrides.setdefault("lookup", {})["max_failures"] = max_failures
    if timeout is not None:
        overrides.setdefault("lookup", {})["request_timeout_seconds"] = timeout
    if usage_stats_path is not None:
        overrides.setdefault("usage", {})["stats_path"] = str(usage_stats_path)

    try:
        settings = bootstrap_settings(path=config_path, overrides=overrides)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))
    typer.echo(f"Configuration initialized at {config_path}")
    typer.echo(_summarize_settings(settings))


@config_app.command("show")
def show_config(config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config")) -> None:
    """Display the stored configuration."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))
    typer.echo(_summarize_settings(settings))


@config_app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key, e.g. lookup.cache_ttl_seconds"),
    value: str = typer.Argument(..., help="New value"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Update a configuration value."""

    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        typer.echo(format_error_for_cli(e), err=True)
        raise typer.Exit(code=exit_code_for(e))

    keys = key.split(".")
    if not _is_known_key(Settings, keys):
        typer.echo(f"❌ Unknown configuration key: {key}", err=True)
        raise typer.Exit(code=1)

    payload = settings.model_dump(mode="python")
    _assign(payload, keys, value)
    try:
        updated = Settings.model_validate(payload)
    except ValidationError as e:
        typer.echo(f"❌ Invalid value for {key}: {e.errors()[0]['msg']}", err=True)
        raise typer.Exit(code=1)
    save_settings(updated, config_path)
    typer.echo(f"Updated {key}")


def _summarize_settings(settings: Settings) -> str:
    data = settings.model_dump(mode="json")
    return json.dumps(data, indent=2)


def _is_known_key(model: type[BaseModel], keys: list[str]) -> bool:
    """True when ``keys`` names a leaf field of ``model``."""
    for i, key in enumerate(keys):
        field = model.model_fields.get(key)
        if field is None:
            return False
        annotation = field.annotation
        nested = isinstance(annotation, type) and issubclass(annotation, BaseModel)
        if i == len(keys) - 1:
            return not nested
        if not nested:
            return False
        model = annotation
    return False


def _assign(payload: dict, keys: list[str], value: str) -> None:
    current = payload
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value
