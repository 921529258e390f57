"""Pytest fixtures shared across fieldconfig tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from fieldconfig.dto import Field, FieldType, Series


@pytest.fixture
def numeric_series() -> list[Series]:
    """Return two series with one numeric field each and no configuration."""

    return [
        Series(fields=(Field(name="a", type=FieldType.number, values=(1, 5, 3)),), name="first"),
        Series(fields=(Field(name="b", type=FieldType.number, values=(-2, 8)),), name="second"),
    ]


@pytest.fixture
def mixed_series() -> list[Series]:
    """Return one unnamed series holding a time, a numeric and a string field."""

    return [
        Series(
            fields=(
                Field(name="time", type=FieldType.time, values=(1_700_000_000, 1_700_000_060)),
                Field(name="cpu", type=FieldType.number, values=(12.5, 97.0)),
                Field(name="host", type=FieldType.string, values=("web-1", "web-2")),
            ),
        )
    ]


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests with no filesystem or environment access.
    - `integration`: tests touching files or process environment.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
