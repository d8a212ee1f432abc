"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the collaborators a persistent
table depends on: byte storage, serialization and encryption.
"""

from condense.ports.outbound.blob_store import BlobStore
from condense.ports.outbound.cipher import Cipher
from condense.ports.outbound.codec import Codec

__all__ = [
    "BlobStore",
    "Codec",
    "Cipher",
]
