"""Lint for FieldConfigSource values.

Resolution never fails on unknown matchers or properties; it skips them. This
module reports those skips ahead of time so editors can surface them. Only
structurally impossible entries are errors.
"""

from __future__ import annotations

from dataclasses import dataclass

from .dto import FieldConfigSource
from .matchers import DEFAULT_MATCHERS, MatcherRegistry
from .overrides import CUSTOM_KEY
from .properties import DEFAULT_PROPERTIES, PropertyRegistry


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Validation result for a FieldConfigSource.

    Args:
        is_valid: True when no errors exist.
        errors: Entries that can never be applied.
        warnings: Entries that resolution will silently skip.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def validate_field_config_source(
    source: FieldConfigSource,
    *,
    matchers: MatcherRegistry = DEFAULT_MATCHERS,
    properties: PropertyRegistry = DEFAULT_PROPERTIES,
) -> ValidationResult:
    """Validate a FieldConfigSource against the matcher and property registries.

    Args:
        source: Defaults and override rules to check.
        matchers: Registry used to resolve matcher ids.
        properties: Registry used to resolve property paths.

    Returns:
        ValidationResult containing errors and warnings.
    """

    errors: list[str] = []
    warnings: list[str] = []

    for key in source.defaults:
        if key == CUSTOM_KEY:
            warnings.append("defaults.custom is not applied by the resolver.")
            continue
        if properties.get(key) is None:
            warnings.append(f"defaults.{key} is not a known property and will be ignored.")

    for idx, rule in enumerate(source.overrides):
        matcher_id = rule.matcher.id
        if not matcher_id.strip():
            errors.append(f"overrides[{idx}].matcher.id must be a non-empty string.")
        elif matchers.get(matcher_id) is None:
            warnings.append(f"overrides[{idx}] uses unknown matcher {matcher_id!r} and will be ignored.")

        if not rule.properties:
            warnings.append(f"overrides[{idx}] has no properties.")
        for prop_idx, prop in enumerate(rule.properties):
            if not prop.path.strip():
                errors.append(f"overrides[{idx}].properties[{prop_idx}].id must be a non-empty string.")
            elif properties.get(prop.path) is None:
                warnings.append(
                    f"overrides[{idx}].properties[{prop_idx}] sets unknown property {prop.path!r} and will be ignored."
                )

    return ValidationResult(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
