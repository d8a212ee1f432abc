"""In-memory halves of the table mutations.

Each function takes a loaded table and returns the table to persist.
The input list is modified in place and returned, matching the
load -> mutate -> rewrite cycle of the persistent table.
"""

from __future__ import annotations

from condense.domain.entities import Row, Table, Value, field_value, merge_rows, strict_equals
from condense.domain.exceptions import IndexOutOfRangeError


def check_index(table: Table, index: int) -> int:
    """Validate a positional row index.

    Negative indices are out of range; rows are addressed from 0 only.

    Raises:
        IndexOutOfRangeError: If ``index`` does not address an existing row.
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise IndexOutOfRangeError(index, len(table))
    if index < 0 or index >= len(table):
        raise IndexOutOfRangeError(index, len(table))
    return index


def insert_row(table: Table, row: Row) -> Table:
    """Append a copy of ``row``."""
    table.append(dict(row))
    return table


def remove_row(table: Table, index: int) -> Table:
    """Delete the row at ``index``; later rows shift down by one."""
    del table[check_index(table, index)]
    return table


def update_row(table: Table, index: int, changes: Row) -> Table:
    """Merge ``changes`` into the row at ``index``, overwriting same-named fields."""
    position = check_index(table, index)
    table[position] = merge_rows(table[position], changes)
    return table


def set_field(table: Table, field: str, value: Value, key: str, val: Value) -> Table:
    """Set ``field`` to ``value`` in every row whose ``key`` strictly equals ``val``."""
    for row in table:
        if strict_equals(field_value(row, key), val):
            row[field] = value
    return table


def index_of(table: Table, key: str, val: Value) -> int:
    """Index of the first row whose ``key`` strictly equals ``val``, or -1."""
    for index, row in enumerate(table):
        if strict_equals(field_value(row, key), val):
            return index
    return -1
