"""Configuration loading utilities for RecipeFinder."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    LookupSettings,
    Settings,
    UsageSettings,
    bootstrap_settings,
    load_settings,
    resolve_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "LookupSettings",
    "Settings",
    "UsageSettings",
    "bootstrap_settings",
    "load_settings",
    "resolve_settings",
    "save_settings",
]
