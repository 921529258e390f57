"""Resolve per-field display configuration from defaults and override rules.

Resolution is a pure transformation: input series and fields are never
mutated. Each field gets a private working copy of its configuration which
is patched in this order:

1. defaults (numeric fields only),
2. every matching override rule, in declaration order (last write wins),
3. threshold floor and min/max ordering,
4. automatic min/max from the global numeric range, when requested. Values
   filled here are never reordered against configured ones.

Unknown matcher ids, unknown properties and rejected values are silent
no-ops; configuration is user-authored and must never break rendering.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Callable, Mapping, MutableMapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Final

import structlog

from .display import DEFAULT_THEME, Theme, get_display_processor
from .dto import (
    DisplayProcessor,
    DynamicConfigValue,
    Field,
    FieldConfig,
    FieldConfigSource,
    FieldMatcher,
    FieldType,
    GlobalMinMax,
    InterpolateFunction,
    OverrideRule,
    Series,
    Threshold,
    is_valid_number,
)
from .matchers import DEFAULT_MATCHERS, MatcherRegistry
from .properties import DEFAULT_PROPERTIES, PropertyRegistry
from .reducers import ReducerID, reduce_field
from .settings import FieldConfigSettings, load_settings

logger = structlog.get_logger()

Reducer = Callable[[Field, Sequence[ReducerID]], Mapping[ReducerID, float | None]]

CUSTOM_KEY: Final[str] = "custom"

_MIN_MAX_REDUCERS: Final[tuple[ReducerID, ...]] = (ReducerID.min, ReducerID.max)


def _no_interpolation(text: str) -> str:
    return text


@dataclass(frozen=True, slots=True)
class CompiledOverride:
    """An override rule whose matcher has been built into a predicate."""

    match: FieldMatcher
    properties: tuple[DynamicConfigValue, ...]


@dataclass(frozen=True, slots=True)
class ResolveOptions:
    """Inputs for `apply_field_overrides`.

    Args:
        data: Series to resolve. None resolves to an empty list.
        field_options: Defaults and override rules. None passes `data` through.
        auto_min_max: Fill missing min/max of numeric fields from the global range.
        theme: Theme handed to the display processor factory.
        replace_variables: Interpolation handed to property processors.
        matchers: Matcher registry used to compile override rules.
        properties: Property registry used to validate values.
        reducer: Reducer used to compute per-field min/max.
        display_factory: Factory building the per-field display processor.
    """

    data: Sequence[Series] | None
    field_options: FieldConfigSource | None
    auto_min_max: bool = False
    theme: Theme = DEFAULT_THEME
    replace_variables: InterpolateFunction = _no_interpolation
    matchers: MatcherRegistry = DEFAULT_MATCHERS
    properties: PropertyRegistry = DEFAULT_PROPERTIES
    reducer: Reducer = reduce_field
    display_factory: Callable[..., DisplayProcessor] = get_display_processor

    @classmethod
    def from_settings(
        cls,
        data: Sequence[Series] | None,
        field_options: FieldConfigSource | None,
        *,
        settings: FieldConfigSettings | None = None,
        **overrides: Any,
    ) -> ResolveOptions:
        """Build options whose `auto_min_max` comes from environment settings.

        Args:
            data: Series to resolve.
            field_options: Defaults and override rules.
            settings: Settings to use; loaded from the environment when omitted.
            **overrides: Any other ResolveOptions field.
        """

        resolved = settings if settings is not None else load_settings()
        overrides.setdefault("auto_min_max", resolved.auto_min_max)
        return cls(data=data, field_options=field_options, **overrides)


def find_numeric_field_min_max(data: Sequence[Series], *, reducer: Reducer = reduce_field) -> GlobalMinMax:
    """Compute the min and max over every numeric field of every series.

    Args:
        data: Series to scan.
        reducer: Reducer used per field.

    Returns:
        GlobalMinMax. When no numeric value exists, `min` is the largest float
        and `max` the most negative one; callers treat that as "no data".
    """

    low = sys.float_info.max
    high = -sys.float_info.max

    for series in data:
        for field in series.fields:
            if field.type is not FieldType.number:
                continue
            stats = reducer(field, _MIN_MAX_REDUCERS)
            field_min = stats.get(ReducerID.min)
            field_max = stats.get(ReducerID.max)
            if field_min is not None and field_min < low:
                low = field_min
            if field_max is not None and field_max > high:
                high = field_max

    return GlobalMinMax(min=low, max=high)


def compile_overrides(
    rules: Sequence[OverrideRule],
    *,
    matchers: MatcherRegistry = DEFAULT_MATCHERS,
) -> tuple[CompiledOverride, ...]:
    """Build predicates for override rules, preserving declaration order.

    Rules naming an unknown matcher id are dropped.
    """

    compiled: list[CompiledOverride] = []
    for rule in rules:
        info = matchers.get(rule.matcher.id)
        if info is None:
            logger.debug("overrides.matcher_unknown", matcher_id=rule.matcher.id)
            continue
        compiled.append(CompiledOverride(match=info.get(rule.matcher.options), properties=tuple(rule.properties)))
    return tuple(compiled)


def set_dynamic_config_value(
    config: FieldConfig,
    value: DynamicConfigValue,
    *,
    properties: PropertyRegistry = DEFAULT_PROPERTIES,
    replace_variables: InterpolateFunction = _no_interpolation,
) -> None:
    """Apply one property patch to a working configuration in place.

    Args:
        config: The field's working configuration.
        value: Property path and raw value.
        properties: Registry providing the property's processor.
        replace_variables: Interpolation handed to the processor.

    Notes:
        Unknown properties and values rejected by the processor leave
        `config` unchanged.
    """

    prop = properties.get(value.path)
    if prop is None:
        logger.debug("overrides.property_unknown", path=value.path)
        return

    existing = _get_path(config, value.path)
    processed = prop.process(value.value, existing, replace_variables)
    if processed is None:
        logger.debug("overrides.value_rejected", path=value.path)
        return
    _set_path(config, value.path, processed)


def set_field_config_defaults(
    config: FieldConfig,
    defaults: Mapping[str, Any] | None,
    *,
    properties: PropertyRegistry = DEFAULT_PROPERTIES,
    replace_variables: InterpolateFunction = _no_interpolation,
) -> None:
    """Merge defaults into a numeric field's working configuration in place.

    Each key goes through the same processor path as override patches. The
    `custom` bucket is not merged yet. Afterwards the first threshold step is
    forced to `-inf` and an inverted min/max pair is swapped.
    """

    if defaults:
        for key, raw in defaults.items():
            if key == CUSTOM_KEY:
                # TODO: merge custom defaults once custom properties declare processors per panel.
                logger.debug("defaults.custom_unsupported", value=raw)
                continue
            set_dynamic_config_value(
                config,
                DynamicConfigValue(path=key, value=raw),
                properties=properties,
                replace_variables=replace_variables,
            )

    enforce_config_invariants(config)


def enforce_config_invariants(config: FieldConfig) -> None:
    """Force the baseline threshold to `-inf` and keep `min <= max`."""

    thresholds = config.get("thresholds")
    if isinstance(thresholds, Sequence) and not isinstance(thresholds, str) and thresholds:
        config["thresholds"] = (_baseline_step(thresholds[0]), *thresholds[1:])

    low = config.get("min")
    high = config.get("max")
    if is_valid_number(low) and is_valid_number(high) and low > high:
        config["min"], config["max"] = high, low


def apply_field_overrides(options: ResolveOptions) -> list[Series]:
    """Return copies of the series with resolved configuration on every field.

    Args:
        options: Series, defaults/override rules and collaborators.

    Returns:
        New series in input order. When `options.data` is None an empty list is
        returned; when `options.field_options` is None, `options.data` itself
        is returned.
    """

    if options.data is None:
        return []
    source = options.field_options
    if source is None:
        return options.data  # type: ignore[return-value]

    data = options.data
    overrides = compile_overrides(source.overrides, matchers=options.matchers)
    global_range: GlobalMinMax | None = None

    resolved: list[Series] = []
    for index, series in enumerate(data):
        name = series.name or f"Series[{index}]"

        fields: list[Field] = []
        for field in series.fields:
            config: FieldConfig = dict(field.config or {})
            is_numeric = field.type is FieldType.number
            if is_numeric:
                set_field_config_defaults(
                    config,
                    source.defaults,
                    properties=options.properties,
                    replace_variables=options.replace_variables,
                )

            for rule in overrides:
                if not rule.match(field):
                    continue
                for prop in rule.properties:
                    set_dynamic_config_value(
                        config,
                        prop,
                        properties=options.properties,
                        replace_variables=options.replace_variables,
                    )

            enforce_config_invariants(config)

            if options.auto_min_max and is_numeric:
                if not is_valid_number(config.get("min")) or not is_valid_number(config.get("max")):
                    if global_range is None:
                        global_range = find_numeric_field_min_max(data, reducer=options.reducer)
                    if not is_valid_number(config.get("min")):
                        config["min"] = global_range.min
                    if not is_valid_number(config.get("max")):
                        config["max"] = global_range.max

            fields.append(
                replace(
                    field,
                    config=config,
                    processor=options.display_factory(field_type=field.type, config=config, theme=options.theme),
                )
            )

        resolved.append(replace(series, fields=tuple(fields), name=name))

    logger.debug(
        "overrides.resolved",
        series_count=len(resolved),
        rule_count=len(overrides),
        global_range_computed=global_range is not None,
    )
    return resolved


def _baseline_step(step: Any) -> Any:
    """Return a copy of the first threshold step with value `-inf`."""

    if isinstance(step, Threshold):
        return replace(step, value=-math.inf)
    if isinstance(step, Mapping):
        return {**step, "value": -math.inf}
    return step


def _get_path(config: Mapping[str, Any], path: str) -> Any:
    """Read a dotted path, returning None when any segment is missing."""

    current: Any = config
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _set_path(config: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write a dotted path, copying intermediate mappings on the way down.

    Intermediate mappings are copied, so nested mappings shared with the input
    field's configuration are never mutated.
    """

    *parents, leaf = path.split(".")
    target = config
    for part in parents:
        existing = target.get(part)
        child = dict(existing) if isinstance(existing, Mapping) else {}
        target[part] = child
        target = child
    target[leaf] = value
