"""Application layer for condense tables.

The application layer binds the pure query algebra to storage.

Exports:
    PersistentTable:
        - PersistentTable: A named table persisted as one (optionally
          encrypted) blob
"""

from condense.application.persistent_table import PersistentTable

__all__ = [
    "PersistentTable",
]
