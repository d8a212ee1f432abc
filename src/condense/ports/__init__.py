"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (BlobStore, Codec, Cipher)

Adapters implement these ports with concrete functionality.
"""

from condense.ports.outbound import BlobStore, Cipher, Codec

__all__ = [
    # Outbound ports
    "BlobStore",
    "Codec",
    "Cipher",
]
