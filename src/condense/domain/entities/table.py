"""Row and table model.

A table is an ordered list of rows and a row is an insertion-ordered
mapping of field name to value. There is no schema: any field may be
missing from any row, so every access goes through a presence check.

Row identity is positional. Removing row ``i`` shifts every later row
down by one, so an index must be re-resolved after each mutation.

Equality:
    Comparisons used by the query layer are strict - both type and value
    must match (``1`` is not ``1.0`` and not ``True``). An absent field
    never matches anything, including ``None``.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Sequence, TypeAlias

Value: TypeAlias = Any
"""A stored value: str, int, float, bool, None, or nested dict/list."""

Row: TypeAlias = dict[str, Value]
"""One record. Field presence is per row."""

Table: TypeAlias = list[Row]
"""An ordered sequence of rows; position is the row's index."""

# Sentinel for "field not present in row"
MISSING = object()


def field_value(row: Row, field: str) -> Value:
    """Return ``row[field]`` or ``MISSING`` when the field is absent."""
    return row.get(field, MISSING)


def strict_equals(left: Value, right: Value) -> bool:
    """Compare two values without any type coercion.

    Dicts are equal when they hold the same keys with strictly equal
    values (key order is ignored); lists compare element-wise.
    """
    if left is MISSING or right is MISSING:
        return False

    if type(left) is not type(right):
        return False

    if isinstance(left, dict):
        if left.keys() != right.keys():
            return False
        return all(strict_equals(value, right[key]) for key, value in left.items())

    if isinstance(left, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(strict_equals(a, b) for a, b in zip(left, right))

    return left == right


def loose_equals(left: Value, right: Value) -> bool:
    """Compare two values with Python's own equality (``1 == 1.0 == True``)."""
    if left is MISSING or right is MISSING:
        return False
    return left == right


def is_empty_value(value: Value) -> bool:
    """Return True for values that projection treats as absent.

    None, False, the empty string, the string ``"0"``, numeric zero and
    empty containers.
    """
    if value is None or value is False or value is MISSING:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def merge_rows(base: Row, overlay: Row) -> Row:
    """Return a new row with ``overlay``'s fields written over ``base``'s."""
    merged = dict(base)
    merged.update(overlay)
    return merged


def fingerprint(value: Value) -> Hashable:
    """Build a hashable key such that equal keys mean strictly equal values.

    Used to drop duplicate rows in linear time. Field order inside a
    mapping does not affect the key.
    """
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda item: str(item[0]))
        return ("dict", tuple((key, fingerprint(item)) for key, item in items))
    if isinstance(value, (list, tuple)):
        return (type(value).__name__, tuple(fingerprint(item) for item in value))
    try:
        hash(value)
    except TypeError:
        return (type(value).__name__, repr(value))
    return (type(value).__name__, value)


def normalize_fields(fields: str | Iterable[str] | None) -> list[str]:
    """Turn a field argument into a list of names.

    A single string is a one-field list; None or an empty string mean
    "all fields" and become an empty list.
    """
    if fields is None:
        return []
    if isinstance(fields, str):
        return [fields] if fields else []
    return list(fields)


def is_table(value: object) -> bool:
    """Check that a decoded document has the shape of a table."""
    if not isinstance(value, list):
        return False
    return all(isinstance(row, dict) for row in value)


def copy_table(table: Sequence[Row]) -> Table:
    """Shallow-copy every row so callers can mutate the result freely."""
    return [dict(row) for row in table]
