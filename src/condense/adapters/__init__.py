"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Outbound adapters: Implement external dependencies (file, memory,
  JSON encoding, password-based encryption)
"""

from condense.adapters.outbound import (
    FileBlobStore,
    JsonCodec,
    MemoryBlobStore,
    PasswordCipher,
)

__all__ = [
    # Outbound adapters
    "FileBlobStore",
    "MemoryBlobStore",
    "JsonCodec",
    "PasswordCipher",
]
