"""Blob Store port for whole-table byte storage.

This outbound port defines the contract for the medium that holds one
table's serialized bytes. Implementations may use a file, memory, or
any other store that can replace a value in a single step.

The blob store is responsible for:
    - Reporting whether the blob exists
    - Reading the whole blob
    - Overwriting the whole blob (never partially)
    - Deleting the blob
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class BlobStore(Protocol):
    """Protocol for single-blob storage.

    The store has no knowledge of the bytes it holds - encoding and
    encryption happen above it.

    Thread Safety:
        None required. Concurrent writers to one location race and the
        last write wins; callers serialize access externally.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the blob (a path, a memory key...)."""
        ...

    @abstractmethod
    def exists(self) -> bool:
        """Return True if the blob is present."""
        ...

    @abstractmethod
    def read(self) -> bytes | None:
        """Read the whole blob.

        Returns:
            The stored bytes, or None if the blob does not exist.

        Raises:
            OSError: If the medium fails.
        """
        ...

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Replace the whole blob with ``data``.

        A subsequent read() must see either the old or the new bytes,
        never a mix of both.

        Raises:
            OSError: If the medium fails.
        """
        ...

    @abstractmethod
    def delete(self) -> bool:
        """Delete the blob.

        Returns:
            True if a blob was deleted, False if none existed.
        """
        ...
