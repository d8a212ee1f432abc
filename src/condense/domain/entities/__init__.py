"""Domain entities for the table engine.

Exports:
    Table model:
        - Value, Row, Table: type aliases for stored data
        - MISSING: sentinel for an absent field
        - strict_equals, loose_equals: value comparison
        - is_empty_value: the emptiness test used by projection
        - merge_rows, fingerprint, normalize_fields, is_table, copy_table
"""

from condense.domain.entities.table import (
    MISSING,
    Row,
    Table,
    Value,
    copy_table,
    field_value,
    fingerprint,
    is_empty_value,
    is_table,
    loose_equals,
    merge_rows,
    normalize_fields,
    strict_equals,
)

__all__ = [
    "Value",
    "Row",
    "Table",
    "MISSING",
    "field_value",
    "strict_equals",
    "loose_equals",
    "is_empty_value",
    "merge_rows",
    "fingerprint",
    "normalize_fields",
    "is_table",
    "copy_table",
]
