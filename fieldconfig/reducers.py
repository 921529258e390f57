"""Statistical reductions over a field's values."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from .dto import Field, is_valid_number


class ReducerID(StrEnum):
    """Supported reductions."""

    min = "min"
    max = "max"
    mean = "mean"
    sum = "sum"
    count = "count"
    first = "first"
    last = "last"


def reduce_field(field: Field, reducers: Iterable[ReducerID | str]) -> dict[ReducerID, float | None]:
    """Reduce a field's values.

    Args:
        field: Field whose values are reduced.
        reducers: Reductions to compute.

    Returns:
        Mapping of reducer id to result. Reductions over an empty value set
        are None, except `count` which is 0.

    Raises:
        ValueError: When a reducer id is not supported.

    Notes:
        None, bools, non-numeric values and NaN are ignored.
    """

    requested = [ReducerID(reducer) for reducer in reducers]
    values = [float(v) for v in field.values if is_valid_number(v)]

    results: dict[ReducerID, float | None] = {}
    for reducer in requested:
        if reducer is ReducerID.count:
            results[reducer] = len(values)
            continue
        if not values:
            results[reducer] = None
            continue
        if reducer is ReducerID.min:
            results[reducer] = min(values)
        elif reducer is ReducerID.max:
            results[reducer] = max(values)
        elif reducer is ReducerID.sum:
            results[reducer] = sum(values)
        elif reducer is ReducerID.mean:
            results[reducer] = sum(values) / len(values)
        elif reducer is ReducerID.first:
            results[reducer] = values[0]
        else:
            results[reducer] = values[-1]
    return results
