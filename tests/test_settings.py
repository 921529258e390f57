"""Tests for environment-driven settings and logging configuration."""

from __future__ import annotations

import pytest
import structlog

from fieldconfig.settings import FieldConfigSettings, configure_logging, load_settings

pytestmark = pytest.mark.integration


def test_load_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use defaults when no environment variables are set."""

    for name in ("FIELDCONFIG_AUTO_MIN_MAX", "FIELDCONFIG_LOG_LEVEL", "FIELDCONFIG_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    assert load_settings() == FieldConfigSettings()


def test_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Parse booleans and level names from the environment."""

    monkeypatch.setenv("FIELDCONFIG_AUTO_MIN_MAX", " Yes ")
    monkeypatch.setenv("FIELDCONFIG_LOG_LEVEL", "debug")
    monkeypatch.setenv("FIELDCONFIG_LOG_JSON", "0")
    assert load_settings() == FieldConfigSettings(auto_min_max=True, log_level="DEBUG", log_json=False)


def test_load_settings_ignores_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fall back to WARNING for unknown level names."""

    monkeypatch.setenv("FIELDCONFIG_LOG_LEVEL", "chatty")
    assert load_settings().log_level == "WARNING"


def test_configure_logging_renders_json(capsys: pytest.CaptureFixture[str]) -> None:
    """Emit JSON events at or above the configured level."""

    try:
        configure_logging(FieldConfigSettings(log_level="INFO", log_json=True))
        logger = structlog.get_logger()
        logger.debug("hidden.event")
        logger.info("visible.event", rule_count=2)
        out = capsys.readouterr().out
    finally:
        structlog.reset_defaults()

    assert "hidden.event" not in out
    assert '"event": "visible.event"' in out
    assert '"rule_count": 2' in out
