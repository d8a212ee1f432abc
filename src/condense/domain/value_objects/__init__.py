"""Value objects for the table engine domain.

Value objects are immutable types that represent domain concepts.

Exports:
    Query Types:
        - JoinMethod: inner, left, right, full
        - EqualityMode: strict or loose membership tests
        - MatchKey: the (left field, right field) pair of a join
"""

from condense.domain.value_objects.query_types import EqualityMode, JoinMethod, MatchKey

__all__ = [
    "JoinMethod",
    "EqualityMode",
    "MatchKey",
]
