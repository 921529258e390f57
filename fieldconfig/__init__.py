"""Field configuration resolution for tabular data series.

This package computes the effective display configuration of every field from
global defaults and ordered override rules. It is pure: it accepts in-memory
series and returns new series without mutating its inputs.
"""

from .dto import (
    DynamicConfigValue,
    Field,
    FieldConfigSource,
    FieldType,
    MatcherConfig,
    OverrideRule,
    Series,
    Threshold,
)
from .overrides import ResolveOptions, apply_field_overrides, find_numeric_field_min_max

__all__ = [
    "DynamicConfigValue",
    "Field",
    "FieldConfigSource",
    "FieldType",
    "MatcherConfig",
    "OverrideRule",
    "ResolveOptions",
    "Series",
    "Threshold",
    "apply_field_overrides",
    "find_numeric_field_min_max",
]
