"""Data types shared by the field-configuration resolver.

Types here are plain containers. Inputs (`Series`, `Field`) are frozen and the
resolver returns new records instead of mutating them. A field's
configuration is an open mapping from property name to value.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

FieldConfig = dict[str, Any]
InterpolateFunction = Callable[[str], str]


class FieldType(StrEnum):
    """Value type tag carried by every field."""

    number = "number"
    string = "string"
    time = "time"
    boolean = "boolean"
    other = "other"


@dataclass(frozen=True, slots=True)
class Threshold:
    """A single threshold step.

    Args:
        value: Lower bound of the step. The first step of a resolved
            configuration is always `-inf`.
        color: Theme colour name or hex string used when the step matches.
        state: Optional free-form state label for the step.
    """

    value: float
    color: str
    state: str | None = None


@dataclass(frozen=True, slots=True)
class DisplayValue:
    """A formatted value produced by a display processor.

    Args:
        text: Display text including any unit suffix.
        numeric: Numeric value, NaN when the raw value is not a number.
        color: Resolved colour, when thresholds or a fixed colour apply.
    """

    text: str
    numeric: float
    color: str | None = None


DisplayProcessor = Callable[[Any], DisplayValue]


@dataclass(frozen=True, slots=True)
class Field:
    """One column of a series.

    Args:
        name: Field name used by name-based matchers.
        type: Value type tag.
        values: Raw values, aligned to the other fields of the series.
        config: Configuration supplied with the field, if any.
        processor: Display processor attached by the resolver.
    """

    name: str
    type: FieldType
    values: tuple[Any, ...] = ()
    config: Mapping[str, Any] | None = None
    processor: DisplayProcessor | None = field(default=None, compare=False)


FieldMatcher = Callable[[Field], bool]


@dataclass(frozen=True, slots=True)
class Series:
    """An ordered collection of fields sharing row alignment.

    Args:
        fields: Fields of the series in display order.
        name: Optional display name.
        ref_id: Optional query reference id.
    """

    fields: tuple[Field, ...]
    name: str | None = None
    ref_id: str | None = None


@dataclass(frozen=True, slots=True)
class MatcherConfig:
    """Declarative matcher selection.

    Args:
        id: Matcher identifier looked up in the matcher registry.
        options: Matcher-specific options, such as a field name or a pattern.
    """

    id: str
    options: Any = None


@dataclass(frozen=True, slots=True)
class DynamicConfigValue:
    """A single property patch inside an override rule.

    Args:
        path: Property path; dotted paths address nested values (`custom.lineWidth`).
        value: Raw value handed to the property's processor.
    """

    path: str
    value: Any = None


@dataclass(frozen=True, slots=True)
class OverrideRule:
    """A matcher plus the property patches applied to matching fields."""

    matcher: MatcherConfig
    properties: tuple[DynamicConfigValue, ...] = ()


@dataclass(frozen=True, slots=True)
class FieldConfigSource:
    """Global defaults plus ordered override rules.

    Args:
        defaults: Partial configuration merged into every numeric field.
        overrides: Override rules, applied in declaration order.
    """

    defaults: Mapping[str, Any] = field(default_factory=dict)
    overrides: tuple[OverrideRule, ...] = ()


@dataclass(frozen=True, slots=True)
class GlobalMinMax:
    """Numeric extent across every numeric field of every series.

    When no numeric value exists the sentinels are returned unchanged
    (`min` is the largest float, `max` the most negative one).
    """

    min: float
    max: float


def is_valid_number(value: object) -> bool:
    """Return True for real numbers, excluding bools and NaN."""

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)
