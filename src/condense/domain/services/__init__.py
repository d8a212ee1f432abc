"""Domain services: the relational algebra over materialized tables.

Services are pure functions. They never touch storage; the persistent
table loads rows, calls into these modules and writes the result back.
"""

from condense.domain.services.mutations import (
    check_index,
    index_of,
    insert_row,
    remove_row,
    set_field,
    update_row,
)
from condense.domain.services.predicates import (
    compile_pattern,
    count,
    exists,
    first,
    get,
    last,
    like,
    where,
    where_in,
)
from condense.domain.services.projection import project_row, select
from condense.domain.services.set_operations import deduplicate, join, union

__all__ = [
    # Projection
    "select",
    "project_row",
    # Predicates
    "where",
    "where_in",
    "like",
    "compile_pattern",
    "exists",
    "count",
    "first",
    "last",
    "get",
    # Set operations
    "union",
    "join",
    "deduplicate",
    # Mutations
    "check_index",
    "insert_row",
    "remove_row",
    "update_row",
    "set_field",
    "index_of",
]
