"""Tests for applying single property patches and merging defaults."""

from __future__ import annotations

import math

import pytest

from fieldconfig.dto import DynamicConfigValue, Threshold
from fieldconfig.overrides import (
    enforce_config_invariants,
    set_dynamic_config_value,
    set_field_config_defaults,
)
from fieldconfig.properties import DEFAULT_PROPERTIES, FieldConfigProperty, process_number

pytestmark = pytest.mark.unit

CUSTOM_PROPERTIES = DEFAULT_PROPERTIES.extend(
    (
        FieldConfigProperty(
            path="custom.lineWidth",
            name="Line width",
            description="Line width in pixels.",
            process=process_number,
        ),
    )
)


def test_set_dynamic_config_value_writes_coerced_value() -> None:
    """Write the processed value for a known property."""

    config: dict[str, object] = {}
    set_dynamic_config_value(config, DynamicConfigValue(path="max", value="42.5"))
    assert config == {"max": 42.5}


def test_set_dynamic_config_value_ignores_unknown_property() -> None:
    """Leave the configuration untouched for unregistered paths."""

    config: dict[str, object] = {"unit": "bytes"}
    set_dynamic_config_value(config, DynamicConfigValue(path="colour", value="red"))
    assert config == {"unit": "bytes"}


def test_set_dynamic_config_value_keeps_existing_value_on_rejection() -> None:
    """Keep the current value when the processor rejects the raw value."""

    config: dict[str, object] = {"min": 5}
    set_dynamic_config_value(config, DynamicConfigValue(path="min", value=float("nan")))
    set_dynamic_config_value(config, DynamicConfigValue(path="min", value=True))
    assert config == {"min": 5}


def test_set_dynamic_config_value_writes_nested_paths_without_sharing() -> None:
    """Create intermediate mappings for dotted paths and copy shared ones."""

    shared_custom = {"fillOpacity": 10}
    config: dict[str, object] = {"custom": shared_custom}
    set_dynamic_config_value(
        config,
        DynamicConfigValue(path="custom.lineWidth", value=3),
        properties=CUSTOM_PROPERTIES,
    )
    assert config == {"custom": {"fillOpacity": 10, "lineWidth": 3}}
    assert shared_custom == {"fillOpacity": 10}

    empty: dict[str, object] = {}
    set_dynamic_config_value(empty, DynamicConfigValue(path="custom.lineWidth", value=2), properties=CUSTOM_PROPERTIES)
    assert empty == {"custom": {"lineWidth": 2}}


def test_set_dynamic_config_value_passes_existing_value_to_processor() -> None:
    """Hand the current value at the property path to the processor."""

    seen: list[object] = []

    def remember(value, existing, replace_variables):
        seen.append(existing)
        return value

    properties = DEFAULT_PROPERTIES.extend(
        (FieldConfigProperty(path="custom.mode", name="Mode", description="", process=remember),)
    )
    config: dict[str, object] = {"custom": {"mode": "lines"}}
    set_dynamic_config_value(config, DynamicConfigValue(path="custom.mode", value="bars"), properties=properties)
    assert seen == ["lines"]
    assert config == {"custom": {"mode": "bars"}}


def test_set_field_config_defaults_skips_custom_bucket() -> None:
    """Do not merge the `custom` defaults bucket."""

    config: dict[str, object] = {}
    set_field_config_defaults(
        config,
        {"custom": {"lineWidth": 4}, "unit": "ms"},
        properties=CUSTOM_PROPERTIES,
    )
    assert config == {"unit": "ms"}


def test_set_field_config_defaults_overwrites_field_values() -> None:
    """Apply defaults on top of the field's own configuration."""

    config: dict[str, object] = {"unit": "bytes", "title": "Memory"}
    set_field_config_defaults(config, {"unit": "percent"})
    assert config == {"unit": "percent", "title": "Memory"}


def test_set_field_config_defaults_enforces_invariants_without_defaults() -> None:
    """Normalize thresholds and min/max even when no defaults are given."""

    config: dict[str, object] = {
        "min": 9,
        "max": 1,
        "thresholds": [{"value": 3, "color": "green"}],
    }
    set_field_config_defaults(config, None)
    assert config["min"] == 1
    assert config["max"] == 9
    assert config["thresholds"] == ({"value": -math.inf, "color": "green"},)


def test_enforce_config_invariants_ignores_partial_bounds() -> None:
    """Leave min alone when max is missing or not a number."""

    config: dict[str, object] = {"min": 9, "max": None, "thresholds": ()}
    enforce_config_invariants(config)
    assert config == {"min": 9, "max": None, "thresholds": ()}


def test_enforce_config_invariants_replaces_threshold_step() -> None:
    """Replace the first step rather than mutating it."""

    step = Threshold(value=0, color="green")
    config: dict[str, object] = {"thresholds": [step, Threshold(value=10, color="red")]}
    enforce_config_invariants(config)
    assert config["thresholds"][0] == Threshold(value=-math.inf, color="green")
    assert step.value == 0
