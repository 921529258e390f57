"""Field configuration property registry and value processors.

Each known configuration property declares a processor that validates and
coerces a raw value (from defaults or an override patch). Processors never
raise on bad input: they return None, and the caller leaves the property
unchanged.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from .dto import InterpolateFunction, Threshold

ValueProcessor = Callable[[Any, Any, InterpolateFunction], Any]

MAX_DECIMALS: Final[int] = 15


@dataclass(frozen=True, slots=True)
class FieldConfigProperty:
    """Describe a configuration property.

    Args:
        path: Property path; dotted for nested values.
        name: Human-friendly name.
        description: Short description.
        process: Processor returning the coerced value, or None to reject it.
    """

    path: str
    name: str
    description: str
    process: ValueProcessor


class PropertyRegistry:
    """Lookup helpers for configuration properties."""

    def __init__(self, properties: Iterable[FieldConfigProperty]) -> None:
        """Initialize a registry from property descriptions."""

        self._properties: dict[str, FieldConfigProperty] = {}
        for prop in properties:
            if prop.path in self._properties:
                raise ValueError(f"Duplicate FieldConfigProperty path: {prop.path!r}")
            self._properties[prop.path] = prop

    def get(self, path: str) -> FieldConfigProperty | None:
        """Return the property for a path, or None when missing."""

        return self._properties.get(path)

    def list(self) -> tuple[FieldConfigProperty, ...]:
        """Return all properties in a stable order."""

        return tuple(self._properties[key] for key in sorted(self._properties.keys()))

    def extend(self, properties: Iterable[FieldConfigProperty]) -> PropertyRegistry:
        """Return a new registry with additional properties registered."""

        return PropertyRegistry((*self._properties.values(), *properties))


def process_number(value: Any, _existing: Any, replace_variables: InterpolateFunction) -> float | int | None:
    """Coerce numbers and numeric strings; reject NaN and infinities.

    Args:
        value: Raw value.
        _existing: Current value (unused).
        replace_variables: Interpolation applied to string input before parsing.

    Returns:
        The number, or None when the value is not a finite number.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = replace_variables(value).replace(",", "").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return number
    return None


def process_decimals(value: Any, existing: Any, replace_variables: InterpolateFunction) -> int | None:
    """Coerce a decimals count into an int in `0..MAX_DECIMALS`."""

    number = process_number(value, existing, replace_variables)
    if number is None:
        return None
    return max(0, min(MAX_DECIMALS, int(number)))


def process_string(value: Any, _existing: Any, replace_variables: InterpolateFunction) -> str | None:
    """Accept non-empty strings after variable interpolation."""

    if not isinstance(value, str):
        return None
    text = replace_variables(value)
    return text or None


def process_unit(value: Any, existing: Any, replace_variables: InterpolateFunction) -> str | None:
    """Accept unit ids; the literal `none` is skipped."""

    text = process_string(value, existing, replace_variables)
    if text is None or text == "none":
        return None
    return text


def process_thresholds(
    value: Any,
    _existing: Any,
    _replace_variables: InterpolateFunction,
) -> tuple[Threshold, ...] | None:
    """Coerce a list of threshold steps.

    Steps may be `Threshold` instances or mappings with `value`/`color` (and an
    optional `state`). A missing or None `value` becomes `-inf`. Any malformed
    step rejects the whole list.
    """

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence) or not value:
        return None

    steps: list[Threshold] = []
    for raw in value:
        step = _coerce_threshold(raw)
        if step is None:
            return None
        steps.append(step)
    return tuple(steps)


def _coerce_threshold(raw: Any) -> Threshold | None:
    """Coerce one threshold step, or None when malformed."""

    if isinstance(raw, Threshold):
        return raw
    if not isinstance(raw, Mapping):
        return None

    color = raw.get("color")
    if not isinstance(color, str) or not color:
        return None

    step_value = raw.get("value")
    if step_value is None:
        step_value = -math.inf
    elif isinstance(step_value, bool) or not isinstance(step_value, (int, float)) or math.isnan(step_value):
        return None

    state = raw.get("state")
    return Threshold(value=float(step_value), color=color, state=str(state) if state is not None else None)


DEFAULT_PROPERTIES: Final[PropertyRegistry] = PropertyRegistry(
    properties=(
        FieldConfigProperty(path="min", name="Min", description="Lower bound for gauges and colour scales.", process=process_number),
        FieldConfigProperty(path="max", name="Max", description="Upper bound for gauges and colour scales.", process=process_number),
        FieldConfigProperty(path="decimals", name="Decimals", description="Number of decimals to display.", process=process_decimals),
        FieldConfigProperty(path="unit", name="Unit", description="Unit id used when formatting values.", process=process_unit),
        FieldConfigProperty(path="title", name="Title", description="Display title for the field.", process=process_string),
        FieldConfigProperty(path="noValue", name="No value", description="Text shown for missing values.", process=process_string),
        FieldConfigProperty(path="color", name="Color", description="Fixed colour when no threshold applies.", process=process_string),
        FieldConfigProperty(path="thresholds", name="Thresholds", description="Ordered threshold steps.", process=process_thresholds),
    )
)
