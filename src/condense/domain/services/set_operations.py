"""Set combination of two tables: union and join.

Join algorithms:
    - INNER: nested loop over every (left, right) pair; each match emits
      one merged row, so a left row may produce zero, one or many rows.
    - LEFT: for each left row, scan right rows in order and stop at the
      first match. Exactly one output row per left row - merged with its
      first match, or the left row alone.
    - RIGHT: the mirror image, one output row per right row.
    - FULL: the projected LEFT result followed by the projected RIGHT
      result, with structural duplicates removed. This keeps each matched
      row once plus the unmatched rows of both sides.

INNER and LEFT/RIGHT are kept as separate loops: first-match-wins is a
different result from full multiplicity, not an optimization of it.

Merged rows always start from the left row and let the right row's
fields overwrite on name collisions, whichever side is preserved. That
keeps the LEFT and RIGHT halves of a FULL join comparable.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from condense.domain.entities import (
    Row,
    Table,
    field_value,
    fingerprint,
    merge_rows,
    strict_equals,
)
from condense.domain.services.projection import select
from condense.domain.value_objects import JoinMethod, MatchKey


def deduplicate(table: Iterable[Row]) -> Table:
    """Drop structurally equal rows, keeping the first occurrence."""
    seen: set[Any] = set()
    result: Table = []
    for row in table:
        key = fingerprint(row)
        if key in seen:
            continue
        seen.add(key)
        result.append(row)
    return result


def union(
    fields: str | Iterable[str] | None,
    left: Sequence[Row],
    right: Sequence[Row],
) -> Table:
    """Project both tables onto ``fields`` and merge them without duplicates.

    Left rows come first; relative order is otherwise preserved.
    """
    return deduplicate(select(fields, left) + select(fields, right))


def _matches(left_row: Row, right_row: Row, match: MatchKey) -> bool:
    return strict_equals(
        field_value(left_row, match.left_field),
        field_value(right_row, match.right_field),
    )


def _inner_join(left: Sequence[Row], right: Sequence[Row], match: MatchKey) -> Table:
    result: Table = []
    for left_row in left:
        for right_row in right:
            if _matches(left_row, right_row, match):
                result.append(merge_rows(left_row, right_row))
    return result


def _left_join(left: Sequence[Row], right: Sequence[Row], match: MatchKey) -> Table:
    result: Table = []
    for left_row in left:
        merged = dict(left_row)
        for right_row in right:
            if _matches(left_row, right_row, match):
                merged = merge_rows(left_row, right_row)
                break
        result.append(merged)
    return result


def _right_join(left: Sequence[Row], right: Sequence[Row], match: MatchKey) -> Table:
    result: Table = []
    for right_row in right:
        merged = dict(right_row)
        for left_row in left:
            if _matches(left_row, right_row, match):
                merged = merge_rows(left_row, right_row)
                break
        result.append(merged)
    return result


def _full_join(
    fields: str | Iterable[str] | None,
    left: Sequence[Row],
    right: Sequence[Row],
    match: MatchKey,
) -> Table:
    # Each half is projected before duplicates are dropped.
    return deduplicate(
        select(fields, _left_join(left, right, match))
        + select(fields, _right_join(left, right, match))
    )


_JOINS = {
    JoinMethod.INNER: _inner_join,
    JoinMethod.LEFT: _left_join,
    JoinMethod.RIGHT: _right_join,
}


def join(
    method: JoinMethod | str,
    fields: str | Iterable[str] | None,
    left: Sequence[Row],
    right: Sequence[Row],
    match: Any,
) -> Table:
    """Join two tables on a single field pair and project the result.

    Args:
        method: inner, left, right or full.
        fields: Fields to return (empty for all).
        left: Left-hand table.
        right: Right-hand table.
        match: MatchKey, ``(left_field, right_field)`` or ``{left_field: right_field}``.

    Returns:
        The joined rows projected onto ``fields``.

    Raises:
        InvalidJoinMethodError: If ``method`` is not a known join.
        InvalidMatchSpecificationError: If ``match`` is not one field pair.

    Example:
        >>> join("left", [], [{"n": "A", "d": "X"}, {"n": "B", "d": "Y"}],
        ...      [{"d": "X", "loc": "1F"}], ("d", "d"))
        [{'n': 'A', 'd': 'X', 'loc': '1F'}, {'n': 'B', 'd': 'Y'}]
    """
    join_method = JoinMethod.parse(method)
    match_key = MatchKey.parse(match)
    if join_method is JoinMethod.FULL:
        return _full_join(fields, left, right, match_key)
    return select(fields, _JOINS[join_method](left, right, match_key))
