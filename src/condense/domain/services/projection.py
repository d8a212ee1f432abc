"""Projection: extract a field subset from every row.

Projection is the last step of every query, so its rules shape every
result the engine returns:

    - With no fields, each row is copied whole.
    - With fields, only the named fields that are present *and* hold a
      non-empty value are copied. ``None``, ``False``, ``""``, ``"0"``,
      zero and empty containers count as empty and are dropped.
    - A row that ends up with no fields is left out entirely, so the
      result can be shorter than the input.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from condense.domain.entities import (
    Row,
    Table,
    is_empty_value,
    normalize_fields,
)


def project_row(fields: Sequence[str], row: Row) -> Row:
    """Project a single row; returns an empty dict if nothing survives."""
    if not fields:
        return dict(row)

    values: Row = {}
    for name in fields:
        if name in row and not is_empty_value(row[name]):
            values[name] = row[name]
    return values


def select(fields: str | Iterable[str] | None, table: Sequence[Row]) -> Table:
    """Project ``table`` onto ``fields``.

    Args:
        fields: Field names to keep; empty (or None) keeps all fields.
            A single string is treated as one field.
        table: Rows to project.

    Returns:
        A new table of freshly built rows.

    Example:
        >>> select(["name"], [{"name": "A", "age": 3}, {"name": "", "age": 4}])
        [{'name': 'A'}]
    """
    names = normalize_fields(fields)
    result: Table = []
    for row in table:
        values = project_row(names, row)
        if values:
            result.append(values)
    return result
