"""Display processors built from a resolved field configuration.

A display processor turns one raw value into a `DisplayValue` (text, numeric
value and colour). It is built once per field after overrides are resolved.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Final

from .dto import DisplayProcessor, DisplayValue, FieldType, Threshold, is_valid_number

DEFAULT_DECIMALS: Final[int] = 2

_UNIT_SUFFIXES: Final[dict[str, str]] = {
    "percent": "%",
    "percentunit": "%",
}


@dataclass(frozen=True, slots=True)
class Theme:
    """Colour palette used to resolve named colours.

    Args:
        name: Theme name.
        colors: Mapping of colour name to hex value.
    """

    name: str
    colors: Mapping[str, str] = field(default_factory=dict)

    def resolve_color(self, color: str) -> str:
        """Return the palette value for a colour name, or the name unchanged."""

        return self.colors.get(color, color)


DEFAULT_THEME: Final[Theme] = Theme(
    name="dark",
    colors={
        "green": "#73BF69",
        "yellow": "#FADE2A",
        "orange": "#FF9830",
        "red": "#F2495C",
        "blue": "#5794F2",
        "purple": "#B877D9",
        "text": "#D8D9DA",
    },
)


def get_display_processor(
    *,
    field_type: FieldType,
    config: Mapping[str, Any],
    theme: Theme = DEFAULT_THEME,
) -> DisplayProcessor:
    """Build a display processor for a resolved field configuration.

    Args:
        field_type: Type of the field the processor formats.
        config: Resolved field configuration.
        theme: Theme used to resolve named colours.

    Returns:
        A callable mapping a raw value to a DisplayValue.
    """

    no_value = config.get("noValue")
    decimals = config.get("decimals")
    unit = config.get("unit")
    fixed_color = config.get("color")
    thresholds: Sequence[Threshold] = config.get("thresholds") or ()

    def process(value: Any) -> DisplayValue:
        if value is None or (isinstance(value, float) and math.isnan(value)):
            return DisplayValue(text=no_value if isinstance(no_value, str) else "", numeric=math.nan)

        if field_type is not FieldType.number or not is_valid_number(value):
            return DisplayValue(text=str(value), numeric=math.nan)

        numeric = float(value)
        text = _format_number(numeric, decimals=decimals) + _unit_suffix(unit)
        color = _threshold_color(numeric, thresholds) or fixed_color
        return DisplayValue(
            text=text,
            numeric=numeric,
            color=theme.resolve_color(color) if isinstance(color, str) else None,
        )

    return process


def _format_number(value: float, *, decimals: object) -> str:
    """Format a number with fixed decimals, or trimmed default precision."""

    if math.isinf(value):
        return "-Inf" if value < 0 else "Inf"
    if isinstance(decimals, int) and not isinstance(decimals, bool):
        return f"{value:.{decimals}f}"
    text = f"{value:.{DEFAULT_DECIMALS}f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _unit_suffix(unit: object) -> str:
    if not isinstance(unit, str) or not unit:
        return ""
    return _UNIT_SUFFIXES.get(unit, f" {unit}")


def _threshold_color(value: float, thresholds: Sequence[Threshold]) -> str | None:
    """Return the colour of the last step whose value is <= `value`."""

    color: str | None = None
    for step in thresholds:
        if step.value <= value:
            color = step.color
    return color
