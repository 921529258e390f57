"""Environment-driven settings for fieldconfig.

Settings are read from environment variables so hosts can tune resolution and
logging without code changes:

- `FIELDCONFIG_AUTO_MIN_MAX`: default for `ResolveOptions.auto_min_max`.
- `FIELDCONFIG_LOG_LEVEL`: minimum log level (default `WARNING`).
- `FIELDCONFIG_LOG_JSON`: render log events as JSON instead of console text.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import structlog


@dataclass(frozen=True, slots=True)
class FieldConfigSettings:
    """Resolved settings.

    Args:
        auto_min_max: Default for automatic min/max ranging.
        log_level: Minimum level name for emitted log events.
        log_json: Whether log events are rendered as JSON.
    """

    auto_min_max: bool = False
    log_level: str = "WARNING"
    log_json: bool = False


def _env_bool(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed boolean value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_level(name: str, *, default: str) -> str:
    """Parse a log level name, falling back to `default` for unknown names."""

    raw = os.getenv(name)
    if raw is None:
        return default
    level = raw.strip().upper()
    if level not in logging.getLevelNamesMapping():
        return default
    return level


def load_settings() -> FieldConfigSettings:
    """Load settings from the process environment."""

    return FieldConfigSettings(
        auto_min_max=_env_bool("FIELDCONFIG_AUTO_MIN_MAX", default=False),
        log_level=_env_level("FIELDCONFIG_LOG_LEVEL", default="WARNING"),
        log_json=_env_bool("FIELDCONFIG_LOG_JSON", default=False),
    )


def configure_logging(settings: FieldConfigSettings | None = None) -> None:
    """Configure structlog for fieldconfig log events.

    Args:
        settings: Settings to apply; loaded from the environment when omitted.
    """

    resolved = settings if settings is not None else load_settings()
    renderer = structlog.processors.JSONRenderer() if resolved.log_json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelNamesMapping()[resolved.log_level]),
        cache_logger_on_first_use=False,
    )
