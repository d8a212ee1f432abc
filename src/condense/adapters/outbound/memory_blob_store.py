"""In-memory Blob Store implementation.

Holds blobs in a dict shared by every store created with the same
``namespace`` mapping, so two tables with the same name see the same
data, just as two file stores pointing at one path do.
"""

from __future__ import annotations

from typing import MutableMapping

# Process-wide default namespace
_BLOBS: dict[str, bytes] = {}


class MemoryBlobStore:
    """Dict-backed implementation of the BlobStore protocol."""

    def __init__(self, name: str, namespace: MutableMapping[str, bytes] | None = None) -> None:
        """Initialize the blob store.

        Args:
            name: Key of the blob inside the namespace.
            namespace: Mapping holding the blobs (default: process-wide dict).
        """
        self._name = name
        self._blobs = _BLOBS if namespace is None else namespace

    @property
    def location(self) -> str:
        return f"memory://{self._name}"

    def exists(self) -> bool:
        return self._name in self._blobs

    def read(self) -> bytes | None:
        return self._blobs.get(self._name)

    def write(self, data: bytes) -> None:
        self._blobs[self._name] = bytes(data)

    def delete(self) -> bool:
        return self._blobs.pop(self._name, None) is not None

    def __repr__(self) -> str:
        return f"MemoryBlobStore({self._name!r})"
