"""Outbound adapters - implementations of outbound ports.

These adapters implement the storage, serialization and encryption
collaborators of a persistent table.
"""

from condense.adapters.outbound.file_blob_store import FileBlobStore
from condense.adapters.outbound.json_codec import JsonCodec
from condense.adapters.outbound.memory_blob_store import MemoryBlobStore
from condense.adapters.outbound.password_cipher import PasswordCipher

__all__ = [
    "FileBlobStore",
    "MemoryBlobStore",
    "JsonCodec",
    "PasswordCipher",
]
