"""
Authenticated Encryption

ChaCha20-Poly1305 over a fully buffered stream.

Ciphertext layout: <nonce:12><ciphertext><tag:16>

The key is either supplied by the caller or generated from the injected
random source. A generated key must be exported and persisted by the
caller, otherwise the ciphertext cannot be opened again.
"""

import os
from typing import BinaryIO, Callable, Optional

import structlog
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from .errors import CryptoError, KeyFormatError
from .signer import KeyBundle, read_stream

logger = structlog.get_logger()

KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_FILENAME = "chacha20poly1305.key"


class ChaCha20Poly1305Encryptor:
    """ChaCha20-Poly1305 encryptor bound to a single 256-bit key."""

    def __init__(
        self,
        key: Optional[bytes] = None,
        rng: Optional[Callable[[int], bytes]] = None,
    ):
        self._rng = rng or os.urandom
        if key is None:
            key = self._rng(KEY_SIZE)
        elif len(key) < KEY_SIZE:
            raise KeyFormatError(
                f"ChaCha20-Poly1305 key must be {KEY_SIZE} bytes, got {len(key)}"
            )
        self._key = bytes(key[:KEY_SIZE])
        self._cipher = ChaCha20Poly1305(self._key)

    def export_key(self) -> bytes:
        """Get the raw key bytes (for persisting to a key file)."""
        return self._key

    def encrypt(self, reader: BinaryIO, aad: Optional[bytes] = None) -> bytes:
        """Encrypt the whole stream and prepend the nonce."""
        plaintext = read_stream(reader)
        nonce = self._rng(NONCE_SIZE)
        try:
            sealed = self._cipher.encrypt(nonce, plaintext, aad)
        except (ValueError, OverflowError) as e:
            raise CryptoError(f"Encryption failed: {e}") from e

        logger.debug("text_encrypted", size=len(plaintext))
        return nonce + sealed

    def decrypt(self, reader: BinaryIO, aad: Optional[bytes] = None) -> bytes:
        """Split off the nonce and open the remaining ciphertext."""
        data = read_stream(reader)
        if len(data) < NONCE_SIZE + TAG_SIZE:
            raise CryptoError(
                f"Ciphertext too short: {len(data)} bytes, "
                f"need at least {NONCE_SIZE + TAG_SIZE}"
            )

        nonce, sealed = data[:NONCE_SIZE], data[NONCE_SIZE:]
        try:
            plaintext = self._cipher.decrypt(nonce, sealed, aad)
        except InvalidTag as e:
            raise CryptoError("Decryption failed: authentication tag mismatch") from e

        logger.debug("text_decrypted", size=len(plaintext))
        return plaintext

    @classmethod
    def generate(cls, rng: Optional[Callable[[int], bytes]] = None) -> KeyBundle:
        """Generate a fresh key under its logical filename."""
        encryptor = cls(rng=rng)
        return {KEY_FILENAME: encryptor.export_key()}
