"""Field matcher registry used by override rules.

An override rule names a matcher by id and carries matcher-specific options.
The registry turns that pair into a predicate over a single field. Lookups
return None for unknown ids; the resolver treats those rules as no-ops.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Final

from .dto import Field, FieldMatcher, FieldType


@dataclass(frozen=True, slots=True)
class MatcherInfo:
    """Describe a matcher kind.

    Args:
        id: Stable identifier referenced by `MatcherConfig.id`.
        name: Human-friendly name.
        description: Short description for editors and lint output.
        get: Builder turning matcher options into a field predicate.
    """

    id: str
    name: str
    description: str
    get: Callable[[Any], FieldMatcher]


class MatcherRegistry:
    """Lookup helpers for matcher builders."""

    def __init__(self, infos: Iterable[MatcherInfo]) -> None:
        """Initialize a registry from matcher descriptions."""

        self._infos: dict[str, MatcherInfo] = {}
        for info in infos:
            if info.id in self._infos:
                raise ValueError(f"Duplicate MatcherInfo id: {info.id!r}")
            self._infos[info.id] = info

    def get(self, matcher_id: str) -> MatcherInfo | None:
        """Return the matcher for an id, or None when missing."""

        return self._infos.get(matcher_id)

    def list(self) -> tuple[MatcherInfo, ...]:
        """Return all matchers in a stable order."""

        return tuple(self._infos[key] for key in sorted(self._infos.keys()))


def _type_matcher(field_type: FieldType) -> Callable[[Any], FieldMatcher]:
    """Build a matcher factory that ignores options and tests a fixed type."""

    def build(_options: Any) -> FieldMatcher:
        return lambda field: field.type == field_type

    return build


def _by_type(options: Any) -> FieldMatcher:
    """Match fields whose type equals the configured type string."""

    return lambda field: str(field.type) == str(options)


def _by_name(options: Any) -> FieldMatcher:
    """Match fields whose name equals the configured name."""

    return lambda field: field.name == options


def _by_names(options: Any) -> FieldMatcher:
    """Match fields whose name is one of the configured names."""

    if isinstance(options, str) or not isinstance(options, Iterable):
        names: frozenset[Any] = frozenset()
    else:
        names = frozenset(options)
    return lambda field: field.name in names


def _by_regexp(options: Any) -> FieldMatcher:
    """Match field names against a regular expression.

    Patterns that do not compile produce a matcher that never matches.
    """

    try:
        pattern = re.compile(str(options))
    except re.error:
        return _never
    return lambda field: pattern.fullmatch(field.name) is not None


def _never(_field: Field) -> bool:
    return False


DEFAULT_MATCHERS: Final[MatcherRegistry] = MatcherRegistry(
    infos=(
        MatcherInfo(
            id="numeric",
            name="Numeric fields",
            description="Fields with a number type.",
            get=_type_matcher(FieldType.number),
        ),
        MatcherInfo(
            id="time",
            name="Time fields",
            description="Fields with a time type.",
            get=_type_matcher(FieldType.time),
        ),
        MatcherInfo(
            id="byType",
            name="Fields with type",
            description="Fields whose type equals the option value.",
            get=_by_type,
        ),
        MatcherInfo(
            id="byName",
            name="Field with name",
            description="The field whose name equals the option value.",
            get=_by_name,
        ),
        MatcherInfo(
            id="byNames",
            name="Fields with names",
            description="Fields whose name is listed in the option value.",
            get=_by_names,
        ),
        MatcherInfo(
            id="byRegexp",
            name="Fields matching regex",
            description="Fields whose full name matches the option pattern.",
            get=_by_regexp,
        ),
    )
)
