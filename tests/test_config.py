"""Tests for settings and logging setup."""

import pytest
import structlog
from pydantic import ValidationError

from sysstats.config import Settings, get_settings
from sysstats.logger import configure_logging
from sysstats.server import build_dispatcher


def test_defaults(monkeypatch):
    """Test the defaults reproduce the stock behavior."""
    for name in ("COMMAND_TIMEOUT", "MAX_PROCESS_LIMIT", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"SYSSTATS_{name}", raising=False)

    settings = Settings()

    assert settings.command_timeout == 30.0
    assert settings.max_process_limit == 100
    assert settings.log_level == "INFO"
    assert settings.log_format == "console"


def test_environment_overrides(monkeypatch):
    """Test SYSSTATS_* variables are read."""
    monkeypatch.setenv("SYSSTATS_COMMAND_TIMEOUT", "2.5")
    monkeypatch.setenv("SYSSTATS_LOG_LEVEL", "debug")
    monkeypatch.setenv("SYSSTATS_LOG_FORMAT", "json")

    settings = Settings()

    assert settings.command_timeout == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"


@pytest.mark.parametrize(
    "field,value",
    [("command_timeout", 0), ("max_process_limit", 0), ("log_level", "LOUD"), ("log_format", "xml")],
)
def test_invalid_values(field, value):
    """Test out-of-range settings are rejected."""
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_get_settings_is_cached():
    """Test get_settings returns one shared instance."""
    assert get_settings() is get_settings()


def test_build_dispatcher_uses_settings():
    """Test the dispatcher is wired from settings."""
    dispatcher = build_dispatcher(Settings(command_timeout=3.0, max_process_limit=7))

    assert dispatcher._monitor.timeout == 3.0
    assert dispatcher._max_limit == 7
    assert len(dispatcher.list_tools()) == 6


@pytest.mark.parametrize("fmt", ["console", "json"])
def test_configure_logging_writes_to_stderr(capsys, fmt):
    """Test log lines go to stderr, never stdout."""
    configure_logging("INFO", fmt)
    try:
        structlog.get_logger("test").info("hello_event", answer=42)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "hello_event" in captured.err
    finally:
        structlog.reset_defaults()


def test_configure_logging_filters_level(capsys):
    """Test events below the configured level are dropped."""
    configure_logging("WARNING")
    try:
        structlog.get_logger("test").info("quiet_event")
        assert "quiet_event" not in capsys.readouterr().err
    finally:
        structlog.reset_defaults()
