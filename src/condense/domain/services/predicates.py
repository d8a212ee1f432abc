"""Predicate queries over a materialized table.

Filters (where, where_in, like) pick rows by one field and then project
the survivors; scalar queries (exists, count, first, last, get) reduce
the table to a single value.

Comparisons are strict unless stated otherwise, and a row that lacks
the tested field never matches.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Sequence

from condense.domain.entities import (
    Row,
    Table,
    Value,
    field_value,
    is_empty_value,
    loose_equals,
    strict_equals,
)
from condense.domain.exceptions import InvalidPatternError, NotFoundError
from condense.domain.services.projection import select
from condense.domain.value_objects import EqualityMode

# Closing delimiter for bracket-style patterns, e.g. {abc}i
_BRACKET_DELIMITERS = {"(": ")", "[": "]", "{": "}", "<": ">"}

_PATTERN_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": re.UNICODE,
}


def _filter(
    fields: str | Iterable[str] | None,
    table: Sequence[Row],
    predicate: Callable[[Row], bool],
) -> Table:
    return select(fields, [row for row in table if predicate(row)])


def where(
    fields: str | Iterable[str] | None,
    key: str,
    val: Value,
    table: Sequence[Row],
) -> Table:
    """Rows whose ``key`` strictly equals ``val``, projected onto ``fields``."""
    return _filter(fields, table, lambda row: strict_equals(field_value(row, key), val))


def where_in(
    fields: str | Iterable[str] | None,
    key: str,
    values: Iterable[Value],
    table: Sequence[Row],
    mode: EqualityMode | str = EqualityMode.STRICT,
) -> Table:
    """Rows whose ``key`` is one of ``values``, projected onto ``fields``.

    Args:
        fields: Fields to return (empty for all).
        key: Field to test.
        values: Accepted values.
        table: Rows to search.
        mode: STRICT compares type and value, LOOSE uses Python equality.
    """
    candidates = list(values)
    equals = loose_equals if EqualityMode(mode) is EqualityMode.LOOSE else strict_equals

    def is_member(row: Row) -> bool:
        current = field_value(row, key)
        return any(equals(current, candidate) for candidate in candidates)

    return _filter(fields, table, is_member)


def compile_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a delimited regular expression such as ``/^a.c$/i``.

    The first character is the delimiter; bracket delimiters close with
    their partner. Trailing letters after the closing delimiter are
    modifiers (i, m, s, x, u). Compiled patterns pass through unchanged.

    Raises:
        InvalidPatternError: If delimiters, modifiers or the body are invalid.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str) or len(pattern) < 2:
        raise InvalidPatternError(f"Pattern must be a delimited string, got {pattern!r}")

    opening = pattern[0]
    if opening.isalnum() or opening.isspace() or opening == "\\":
        raise InvalidPatternError(f"Invalid pattern delimiter {opening!r} in {pattern!r}")

    closing = _BRACKET_DELIMITERS.get(opening, opening)
    end = pattern.rfind(closing)
    if end <= 0:
        raise InvalidPatternError(f"No ending delimiter {closing!r} in {pattern!r}")

    body, modifiers = pattern[1:end], pattern[end + 1:]
    flags = 0
    for modifier in modifiers:
        if modifier not in _PATTERN_FLAGS:
            raise InvalidPatternError(f"Unknown modifier {modifier!r} in {pattern!r}")
        flags |= _PATTERN_FLAGS[modifier]

    try:
        return re.compile(body, flags)
    except re.error as e:
        raise InvalidPatternError(f"Invalid regular expression {pattern!r}: {e}") from e


def like(
    fields: str | Iterable[str] | None,
    key: str,
    pattern: str | re.Pattern[str],
    table: Sequence[Row],
) -> Table:
    """Rows whose string ``key`` matches ``pattern``, projected onto ``fields``.

    The pattern is searched anywhere in the value. Missing fields and
    non-string values never match.
    """
    regex = compile_pattern(pattern)

    def matches(row: Row) -> bool:
        current = field_value(row, key)
        return isinstance(current, str) and regex.search(current) is not None

    return _filter(fields, table, matches)


def exists(key: str, val: Value, table: Sequence[Row]) -> bool:
    """Check whether any row strictly holds ``val`` at ``key``."""
    return any(strict_equals(field_value(row, key), val) for row in table)


def count(field: str | None, table: Sequence[Row]) -> int:
    """Count rows with a non-empty ``field`` (or with any field, if empty)."""
    return len(select(field or [], table))


def first(field: str, table: Sequence[Row]) -> Value:
    """Value of ``field`` in the first row that has a non-empty one.

    Raises:
        NotFoundError: If no row has a non-empty ``field``.
    """
    values = select([field], table)
    if not values:
        raise NotFoundError(f"No row has a value for field {field!r}")
    return values[0][field]


def last(field: str, table: Sequence[Row]) -> Value:
    """Value of ``field`` in the last row that has a non-empty one.

    Raises:
        NotFoundError: If no row has a non-empty ``field``.
    """
    values = select([field], table)
    if not values:
        raise NotFoundError(f"No row has a value for field {field!r}")
    return values[-1][field]


def get(field: str, key: str, val: Value, table: Sequence[Row]) -> Value | None:
    """Value of ``field`` in the first row where ``key`` strictly equals ``val``.

    Rows whose ``field`` is empty are skipped. Returns None when no row
    qualifies.
    """
    for row in table:
        if strict_equals(field_value(row, key), val) and not is_empty_value(
            field_value(row, field)
        ):
            return row[field]
    return None
