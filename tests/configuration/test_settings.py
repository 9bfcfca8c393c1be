"""Tests for typed settings loading."""

import json

import pytest
from pydantic import ValidationError

from recipefinder.configuration.settings import (
    LookupSettings,
    Settings,
    bootstrap_settings,
    load_settings,
    resolve_settings,
    save_settings,
)
from recipefinder.errors import InvalidConfigError, MissingConfigError


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "config.json"


def test_defaults_match_lookup_policy():
    """Test default lookup policy."""
    settings = LookupSettings()

    assert settings.cache_ttl_seconds == 300
    assert settings.failure_window_seconds == 60
    assert settings.max_failures == 3
    assert settings.request_timeout_seconds == 5
    assert settings.min_query_length == 2
    assert settings.single_flight is False


def test_endpoint_urls_are_validated():
    """Test endpoint URLs are validated."""
    assert LookupSettings(wikidata_endpoint="https://example.org/sparql/").wikidata_endpoint == (
        "https://example.org/sparql"
    )
    with pytest.raises(ValidationError):
        LookupSettings(wikidata_endpoint="ftp://example.org/sparql")


def test_load_settings_missing_file(config_path):
    """Test loading a missing settings file."""
    with pytest.raises(MissingConfigError) as exc_info:
        load_settings(config_path)

    assert exc_info.value.details["path"] == str(config_path)


def test_load_settings_invalid_json(config_path):
    """Test loading invalid JSON."""
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{")

    with pytest.raises(InvalidConfigError):
        load_settings(config_path)


def test_load_settings_invalid_values(config_path):
    """Test loading invalid values."""
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps({"lookup": {"max_failures": 0}}))

    with pytest.raises(InvalidConfigError):
        load_settings(config_path)


def test_save_then_load(config_path):
    """Test save then load."""
    settings = Settings(lookup=LookupSettings(cache_ttl_seconds=42))

    save_settings(settings, config_path)

    assert load_settings(config_path) == settings


def test_bootstrap_creates_file_with_overrides(config_path):
    """Test bootstrap creates the file with overrides."""
    settings = bootstrap_settings(path=config_path, overrides={"lookup": {"max_failures": 5}})

    assert settings.lookup.max_failures == 5
    assert settings.lookup.cache_ttl_seconds == 300
    assert json.loads(config_path.read_text())["lookup"]["max_failures"] == 5


def test_bootstrap_merges_into_existing_file(config_path):
    """Test bootstrap merges into an existing file."""
    bootstrap_settings(path=config_path, overrides={"lookup": {"max_failures": 5}})

    settings = bootstrap_settings(path=config_path, overrides={"lookup": {"request_timeout_seconds": 2}})

    assert settings.lookup.max_failures == 5
    assert settings.lookup.request_timeout_seconds == 2


def test_bootstrap_rejects_invalid_override(config_path):
    """Test bootstrap rejects an invalid override."""
    with pytest.raises(InvalidConfigError):
        bootstrap_settings(path=config_path, overrides={"lookup": {"cache_ttl_seconds": -1}})

    assert not config_path.exists()


def test_environment_overrides(config_path, monkeypatch):
    """Test environment overrides."""
    monkeypatch.setenv("RECIPEFINDER_CACHE_TTL", "120")
    monkeypatch.setenv("RECIPEFINDER_SINGLE_FLIGHT", "yes")
    monkeypatch.setenv("RECIPEFINDER_FREE_MONTHLY_LIMIT", "100")

    settings = bootstrap_settings(path=config_path)

    assert settings.lookup.cache_ttl_seconds == 120
    assert settings.lookup.single_flight is True
    assert settings.usage.free_monthly_limit == 100


def test_bad_environment_value(config_path, monkeypatch):
    """Test a bad environment value."""
    monkeypatch.setenv("RECIPEFINDER_MAX_FAILURES", "three")

    with pytest.raises(InvalidConfigError) as exc_info:
        resolve_settings(config_path)

    assert exc_info.value.details["env"] == "RECIPEFINDER_MAX_FAILURES"


def test_resolve_settings_does_not_write(config_path, monkeypatch):
    """Test resolve_settings does not write to disk."""
    monkeypatch.setenv("RECIPEFINDER_REQUEST_TIMEOUT", "1.5")

    settings = resolve_settings(config_path)

    assert settings.lookup.request_timeout_seconds == 1.5
    assert not config_path.exists()
