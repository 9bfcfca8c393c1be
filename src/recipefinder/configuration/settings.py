"""Typed settings management for RecipeFinder.

This module wraps configuration in Pydantic models so lookup clients, the
usage tracker and CLI commands can rely on validated settings. Values come
from a JSON file, then caller overrides, then ``RECIPEFINDER_*`` environment
variables.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from recipefinder.errors import InvalidConfigError, MissingConfigError


DEFAULT_CONFIG_PATH = Path.home() / ".recipefinder" / "config.json"
DEFAULT_USAGE_STATS_PATH = Path.home() / ".recipefinder" / "api-usage-stats.json"
DEFAULT_USER_AGENT = "RecipeFinder/1.0 (https://github.com/recipefinder/recipefinder) python-httpx"


class LookupSettings(BaseModel):
    """Shared policy for every resilient lookup client."""

    cache_ttl_seconds: float = Field(300.0, gt=0, description="Freshness window of cached results")
    failure_window_seconds: float = Field(60.0, gt=0, description="Trailing window for counted failures")
    max_failures: int = Field(3, ge=1, description="Failures within the window that open the breaker")
    request_timeout_seconds: float = Field(5.0, gt=0, description="Timeout per upstream call")
    min_query_length: int = Field(2, ge=1, description="Shorter queries return no suggestions")
    default_limit: int = Field(10, ge=1, le=50, description="Default number of suggestions")
    single_flight: bool = Field(False, description="Coalesce concurrent identical lookups")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="Client identifier header")
    wikidata_endpoint: str = Field("https://query.wikidata.org/sparql")
    wikipedia_search_url: str = Field("https://en.wikipedia.org/w/rest.php/v1/search/page")
    wikipedia_summary_url: str = Field("https://en.wikipedia.org/api/rest_v1/page/summary")

    @field_validator("wikidata_endpoint", "wikipedia_search_url", "wikipedia_summary_url")
    def _validate_url(cls, value: str) -> str:
        if not value.startswith("http://") and not value.startswith("https://"):
            raise ValueError("endpoint URLs must start with http:// or https://")
        return value.rstrip("/")


class UsageSettings(BaseModel):
    """Google Places usage accounting."""

    stats_path: Path = Field(default=DEFAULT_USAGE_STATS_PATH)
    free_monthly_limit: int = Field(6250, ge=0, description="Calls covered by the monthly credit")
    cost_per_request: float = Field(0.032, ge=0, description="USD per call beyond the free limit")
    warning_threshold_percent: float = Field(80.0, ge=0, le=100)
    daily_retention_days: int = Field(30, ge=1, le=365)
    monthly_retention_months: int = Field(12, ge=1, le=120)


class Settings(BaseModel):
    """Root configuration state."""

    lookup: LookupSettings = Field(default_factory=LookupSettings)
    usage: UsageSettings = Field(default_factory=UsageSettings)


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from disk or raise if missing or invalid."""

    if not path.exists():
        raise MissingConfigError(
            f"Settings file not found at {path}", details={"path": str(path)}
        )
    try:
        payload = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(f"Settings file is not valid JSON: {exc}") from exc
    try:
        return Settings.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc


def save_settings(settings: Settings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk."""

    payload = settings.model_dump(mode="json")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def bootstrap_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Create or load settings respecting overrides and environment."""

    overrides = overrides or {}

    if path.exists():
        settings = load_settings(path)
    else:
        settings = Settings()

    merged = settings.model_dump(mode="python")
    merged = _apply_overrides(merged, overrides)
    merged = _apply_env_overrides(merged)

    try:
        resolved = Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc
    save_settings(resolved, path)
    return resolved


def resolve_settings(path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Settings from ``path`` if present, defaults otherwise, env applied."""

    base = load_settings(path) if path.exists() else Settings()
    merged = _apply_env_overrides(base.model_dump(mode="python"))
    try:
        return Settings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _apply_overrides(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    lookup = data.setdefault("lookup", {})
    _set_env_override(lookup, "cache_ttl_seconds", "RECIPEFINDER_CACHE_TTL", cast_float=True)
    _set_env_override(lookup, "failure_window_seconds", "RECIPEFINDER_FAILURE_WINDOW", cast_float=True)
    _set_env_override(lookup, "max_failures", "RECIPEFINDER_MAX_FAILURES", cast_int=True)
    _set_env_override(lookup, "request_timeout_seconds", "RECIPEFINDER_REQUEST_TIMEOUT", cast_float=True)
    _set_env_override(lookup, "single_flight", "RECIPEFINDER_SINGLE_FLIGHT", cast_bool=True)
    _set_env_override(lookup, "user_agent", "RECIPEFINDER_USER_AGENT")
    _set_env_override(lookup, "wikidata_endpoint", "RECIPEFINDER_WIKIDATA_ENDPOINT")

    usage = data.setdefault("usage", {})
    _set_env_override(usage, "stats_path", "RECIPEFINDER_USAGE_STATS_PATH")
    _set_env_override(usage, "free_monthly_limit", "RECIPEFINDER_FREE_MONTHLY_LIMIT", cast_int=True)
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_bool: bool = False,
    cast_int: bool = False,
    cast_float: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    try:
        if cast_bool:
            mapping[key] = raw.lower() in {"1", "true", "yes"}
        elif cast_int:
            mapping[key] = int(raw)
        elif cast_float:
            mapping[key] = float(raw)
        else:
            mapping[key] = raw
    except ValueError as exc:
        raise InvalidConfigError(
            f"{env_name} has an invalid value", details={"env": env_name}
        ) from exc
