"""
Condense - flat-file tables with a relational query layer

A small in-process data store: rows are kept as an ordered list of
key/value mappings, persisted as a single (optionally encrypted) blob per
named table, and queried with select/where/in/like/union/join.
"""

__version__ = "1.0.0"
__author__ = "Systems Engineering Portfolio"

from condense.application import PersistentTable
from condense.domain.entities import Row, Table, Value
from condense.domain.exceptions import (
    CondenseError,
    CorruptDataError,
    DecryptionError,
    IndexOutOfRangeError,
    InvalidJoinMethodError,
    InvalidMatchSpecificationError,
    InvalidPatternError,
    NotFoundError,
)
from condense.domain.services import (
    count,
    exists,
    first,
    get,
    join,
    last,
    like,
    select,
    union,
    where,
    where_in,
)
from condense.domain.value_objects import EqualityMode, JoinMethod, MatchKey

__all__ = [
    "PersistentTable",
    # Model
    "Row",
    "Table",
    "Value",
    "MatchKey",
    "JoinMethod",
    "EqualityMode",
    # Algebra
    "select",
    "where",
    "where_in",
    "like",
    "exists",
    "count",
    "first",
    "last",
    "get",
    "union",
    "join",
    # Errors
    "CondenseError",
    "CorruptDataError",
    "DecryptionError",
    "IndexOutOfRangeError",
    "InvalidJoinMethodError",
    "InvalidMatchSpecificationError",
    "InvalidPatternError",
    "NotFoundError",
]
