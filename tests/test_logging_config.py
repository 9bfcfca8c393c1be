"""Tests for the logging bootstrap."""

import logging

import pytest

from recipefinder import logging_config
from recipefinder.logging_config import LOG_LEVEL_ENV, configure_logging


@pytest.fixture
def basic_config_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setattr(logging_config, "_CONFIGURED", False)
    yield calls
    logging.getLogger("recipefinder").setLevel(logging.NOTSET)
    logging.getLogger("httpx").setLevel(logging.NOTSET)


def test_level_from_environment(monkeypatch, basic_config_calls):
    """Test log level from the environment."""
    monkeypatch.setenv(LOG_LEVEL_ENV, "debug")

    assert configure_logging() == logging.DEBUG
    assert basic_config_calls[0]["level"] == logging.DEBUG
    assert logging.getLogger("recipefinder").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_configures_once_unless_forced(monkeypatch, basic_config_calls):
    """Test logging is configured once unless forced."""
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)

    assert configure_logging() == logging.INFO
    configure_logging("WARNING")
    configure_logging(logging.ERROR, force=True)

    assert [call["level"] for call in basic_config_calls] == [logging.INFO, logging.ERROR]
    assert basic_config_calls[1]["force"] is True


def test_unknown_level_falls_back_to_info(basic_config_calls):
    """Test unknown levels fall back to INFO."""
    assert configure_logging("chatty") == logging.INFO
