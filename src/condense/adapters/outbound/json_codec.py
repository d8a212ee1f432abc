"""JSON codec for table blobs.

A table is stored as a UTF-8 JSON array of objects, e.g.::

    [{"name":"A","dept":"X"},{"name":"B","dept":"Y"}]

Field order within each row survives a round trip.
"""

from __future__ import annotations

import json

from condense.domain.entities import Table, is_table
from condense.domain.exceptions import CorruptDataError


class JsonCodec:
    """JSON implementation of the Codec protocol."""

    def __init__(self, ensure_ascii: bool = False) -> None:
        """Initialize the codec.

        Args:
            ensure_ascii: Escape non-ASCII characters instead of writing UTF-8.
        """
        self._ensure_ascii = ensure_ascii

    def encode(self, table: Table) -> bytes:
        """Serialize a table to compact JSON.

        Raises:
            TypeError: If a value is not JSON-serializable.
            ValueError: If a value is NaN or infinite.
        """
        text = json.dumps(
            table,
            ensure_ascii=self._ensure_ascii,
            separators=(",", ":"),
            allow_nan=False,
        )
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Table:
        """Deserialize JSON bytes into a table.

        Raises:
            CorruptDataError: If the bytes are not UTF-8 JSON or the
                document is not a list of objects.
        """
        try:
            document = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"not UTF-8 text ({e.reason})") from e
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e

        if not is_table(document):
            raise CorruptDataError(
                f"expected a list of objects, got {type(document).__name__}"
            )
        return document
