"""Cipher port for authenticated encryption of table blobs."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol


class Cipher(Protocol):
    """Protocol for symmetric, authenticated encryption keyed by a secret.

    open(seal(data, key), key) must return ``data`` unchanged. Any change
    to the sealed bytes, or a different key, must be detected.
    """

    @abstractmethod
    def seal(self, data: bytes, key: str) -> bytes:
        """Encrypt and authenticate ``data`` under ``key``."""
        ...

    @abstractmethod
    def open(self, data: bytes, key: str) -> bytes:
        """Verify and decrypt ``data`` sealed under ``key``.

        Raises:
            DecryptionError: On a wrong key, tampering or malformed input.
        """
        ...
