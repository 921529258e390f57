"""Encoding/decoding helpers for FieldConfigSource payloads.

Payloads are plain dictionaries (JSON or YAML documents):

    defaults:
      unit: percent
      thresholds:
        - {value: null, color: green}
        - {value: 80, color: red}
    overrides:
      - matcher: {id: byName, options: cpu}
        properties:
          - {id: max, value: 100}

Only structure is checked here; raw values are left to the property
processors at resolution time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from pathlib import Path
from typing import Any, cast

import structlog
import yaml

from .dto import DynamicConfigValue, FieldConfigSource, MatcherConfig, OverrideRule, Threshold

logger = structlog.get_logger()


class FieldConfigSourceError(ValueError):
    """Raised when a payload cannot be decoded into a FieldConfigSource."""

    def __init__(self, message: str, *, location: str) -> None:
        """Initialize the error.

        Args:
            message: Description of the problem.
            location: Dotted location of the offending entry (e.g. `overrides[1].matcher`).
        """

        super().__init__(f"{location}: {message}")
        self.location = location


def decode_field_config_source(payload: Mapping[str, Any]) -> FieldConfigSource:
    """Decode a FieldConfigSource from a payload dictionary.

    Args:
        payload: Mapping with optional `defaults` and `overrides` keys.

    Returns:
        FieldConfigSource instance.

    Raises:
        FieldConfigSourceError: When required entries are missing or have the wrong shape.
    """

    if not isinstance(payload, Mapping):
        raise FieldConfigSourceError(f"expected a mapping, got {type(payload).__name__}", location="root")

    defaults = payload.get("defaults") or {}
    if not isinstance(defaults, Mapping):
        raise FieldConfigSourceError("must be a mapping", location="defaults")

    overrides_raw = payload.get("overrides") or []
    if not isinstance(overrides_raw, list):
        raise FieldConfigSourceError("must be a list", location="overrides")

    overrides = tuple(_decode_rule(raw, location=f"overrides[{idx}]") for idx, raw in enumerate(overrides_raw))
    return FieldConfigSource(defaults=dict(defaults), overrides=overrides)


def _decode_rule(raw: object, *, location: str) -> OverrideRule:
    if not isinstance(raw, Mapping):
        raise FieldConfigSourceError("must be a mapping", location=location)

    matcher_raw = raw.get("matcher")
    if not isinstance(matcher_raw, Mapping):
        raise FieldConfigSourceError("must be a mapping", location=f"{location}.matcher")
    matcher_id = matcher_raw.get("id")
    if not isinstance(matcher_id, str) or not matcher_id.strip():
        raise FieldConfigSourceError("must be a non-empty string", location=f"{location}.matcher.id")

    properties_raw = raw.get("properties") or []
    if not isinstance(properties_raw, list):
        raise FieldConfigSourceError("must be a list", location=f"{location}.properties")

    properties: list[DynamicConfigValue] = []
    for idx, prop in enumerate(properties_raw):
        prop_location = f"{location}.properties[{idx}]"
        if not isinstance(prop, Mapping):
            raise FieldConfigSourceError("must be a mapping", location=prop_location)
        path = prop.get("id", prop.get("path"))
        if not isinstance(path, str) or not path.strip():
            raise FieldConfigSourceError("must be a non-empty string", location=f"{prop_location}.id")
        properties.append(DynamicConfigValue(path=path, value=prop.get("value")))

    return OverrideRule(
        matcher=MatcherConfig(id=matcher_id, options=matcher_raw.get("options")),
        properties=tuple(properties),
    )


def encode_field_config_source(source: FieldConfigSource) -> dict[str, Any]:
    """Encode a FieldConfigSource into a plain dictionary.

    Args:
        source: FieldConfigSource to encode.

    Returns:
        Dict payload accepted by `decode_field_config_source`, safe for
        `yaml.safe_dump` and the `json` module defaults. A baseline threshold
        keeps its `-inf` value as a float, so strict JSON (`allow_nan=False`)
        rejects it.
    """

    return {
        "defaults": {key: _encode_value(value) for key, value in source.defaults.items()},
        "overrides": [
            {
                "matcher": {"id": rule.matcher.id, "options": _encode_value(rule.matcher.options)},
                "properties": [{"id": prop.path, "value": _encode_value(prop.value)} for prop in rule.properties],
            }
            for rule in source.overrides
        ],
    }


def _encode_value(value: Any) -> Any:
    """Convert tuples and Threshold steps into plain lists and dicts."""

    if isinstance(value, Threshold):
        return asdict(value)
    if isinstance(value, Mapping):
        return {key: _encode_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    return value


def load_field_config_source(path: Path | str) -> FieldConfigSource:
    """Load a FieldConfigSource from a YAML file.

    Args:
        path: Path to a YAML document.

    Returns:
        Decoded FieldConfigSource.

    Raises:
        FileNotFoundError: When the file does not exist.
        FieldConfigSourceError: When the YAML is invalid or has the wrong shape.
    """

    path = Path(path)
    raw = path.read_text(encoding="utf-8")
    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise FieldConfigSourceError(f"invalid YAML: {exc}", location=str(path)) from exc

    source = decode_field_config_source(cast(Mapping[str, Any], payload))
    logger.debug("loader.loaded", path=str(path), rule_count=len(source.overrides))
    return source
