"""Codec port: table <-> bytes."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from condense.domain.entities import Table


class Codec(Protocol):
    """Protocol for serializing a whole table."""

    @abstractmethod
    def encode(self, table: Table) -> bytes:
        """Serialize ``table``.

        Raises:
            TypeError: If a row holds a value the format cannot represent.
        """
        ...

    @abstractmethod
    def decode(self, data: bytes) -> Table:
        """Deserialize bytes produced by encode().

        Raises:
            CorruptDataError: If ``data`` is not a serialized table.
        """
        ...
