"""Password-based authenticated encryption for table blobs.

This adapter implements the Cipher protocol with the ``cryptography``
package: a 256-bit key is derived from the password with
PBKDF2-HMAC-SHA256 and a fresh random salt, then the data is sealed
with AES-GCM.

Envelope Format:
    Header (9 bytes): Magic (4 bytes) + Salt Length (1 byte) + KDF Iterations (4 bytes)
    Salt (salt_length bytes)
    Nonce (12 bytes)
    Ciphertext + GCM Tag (len(data) + 16 bytes)

The header is passed to AES-GCM as associated data, so altering any
byte of the envelope makes open() fail. Iterations are stored per blob;
changing the configured count only affects blobs sealed afterwards.
"""

from __future__ import annotations

import os
import struct

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from condense.domain.exceptions import DecryptionError

ENVELOPE_MAGIC = b"CDN1"
HEADER_FORMAT = ">4sBI"  # magic, salt_length, kdf_iterations
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32


class PasswordCipher:
    """AES-GCM implementation of the Cipher protocol keyed by a password.

    Example:
        >>> cipher = PasswordCipher(kdf_iterations=1000)
        >>> cipher.open(cipher.seal(b"[]", "secret"), "secret")
        b'[]'
    """

    def __init__(self, kdf_iterations: int = 200_000, salt_size: int = 16) -> None:
        """Initialize the cipher.

        Args:
            kdf_iterations: PBKDF2 iterations used when sealing.
            salt_size: Random salt size in bytes.

        Raises:
            ValueError: If a parameter is out of range.
        """
        if kdf_iterations < 1:
            raise ValueError(f"kdf_iterations must be positive, got {kdf_iterations}")
        if not 8 <= salt_size <= 255:
            raise ValueError(f"salt_size must be between 8 and 255, got {salt_size}")
        self._kdf_iterations = kdf_iterations
        self._salt_size = salt_size

    @staticmethod
    def _derive_key(password: str, salt: bytes, iterations: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(password.encode("utf-8"))

    def seal(self, data: bytes, key: str) -> bytes:
        """Encrypt ``data`` under the password ``key``."""
        salt = os.urandom(self._salt_size)
        nonce = os.urandom(NONCE_SIZE)
        header = struct.pack(HEADER_FORMAT, ENVELOPE_MAGIC, self._salt_size, self._kdf_iterations)

        derived = self._derive_key(key, salt, self._kdf_iterations)
        ciphertext = AESGCM(derived).encrypt(nonce, data, header)

        return header + salt + nonce + ciphertext

    def open(self, data: bytes, key: str) -> bytes:
        """Decrypt an envelope produced by seal().

        Raises:
            DecryptionError: If the envelope is malformed, the key is
                wrong, or any byte was modified.
        """
        if len(data) < HEADER_SIZE:
            raise DecryptionError("Ciphertext too short to hold an envelope header")

        magic, salt_size, iterations = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])
        if magic != ENVELOPE_MAGIC:
            raise DecryptionError(f"Not an encrypted table: bad magic {magic!r}")
        if iterations < 1:
            raise DecryptionError("Invalid envelope: zero KDF iterations")

        body_start = HEADER_SIZE + salt_size + NONCE_SIZE
        if len(data) < body_start + TAG_SIZE:
            raise DecryptionError("Ciphertext truncated")

        header = data[:HEADER_SIZE]
        salt = data[HEADER_SIZE:HEADER_SIZE + salt_size]
        nonce = data[HEADER_SIZE + salt_size:body_start]

        derived = self._derive_key(key, salt, iterations)
        try:
            return AESGCM(derived).decrypt(nonce, data[body_start:], header)
        except InvalidTag as e:
            raise DecryptionError("Wrong key or tampered ciphertext") from e
