"""
Text Signing Implementation

Supports:
- Blake3 - Keyed hash over the whole input (symmetric, 32-byte key)
- Ed25519 - RFC 8032 signatures (asymmetric, 32-byte seed / public key)

Signers and verifiers read the entire stream into memory before computing.
"""

import hmac
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO, Callable, Dict, Optional

import blake3
import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from .errors import KeyFormatError, SignatureFormatError, StreamIOError
from .passwords import ByteSourceRandom, generate_password

logger = structlog.get_logger()

KEY_SIZE = 32
BLAKE3_SIGNATURE_SIZE = 32
ED25519_SIGNATURE_SIZE = 64

KeyBundle = Dict[str, bytes]
RandomSource = Callable[[int], bytes]

# Edwards25519 field prime, curve constant d and sqrt(-1) (RFC 8032 section 5.1)
_P = 2 ** 255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P
_SQRT_M1 = pow(2, (_P - 1) // 4, _P)


class TextSignFormat(Enum):
    """Supported text signing schemes."""
    BLAKE3 = "blake3"
    ED25519 = "ed25519"

    @classmethod
    def parse(cls, value: str) -> "TextSignFormat":
        """Parse a lowercase format tag."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Invalid format: {value!r} (expected one of: "
                f"{', '.join(f.value for f in cls)})"
            ) from None

    def __str__(self) -> str:
        return self.value


def read_stream(reader: BinaryIO) -> bytes:
    """Read a stream to the end, translating read failures."""
    try:
        data = reader.read()
    except OSError as e:
        raise StreamIOError(f"Failed to read input: {e}") from e
    if isinstance(data, str):
        data = data.encode("utf-8")
    return data


def is_valid_ed25519_point(public_bytes: bytes) -> bool:
    """
    Check that 32 bytes decode to a point on Edwards25519.

    Follows the decoding in RFC 8032 section 5.1.3: y must be canonical
    and x^2 = (y^2 - 1) / (d*y^2 + 1) must have a square root.
    """
    if len(public_bytes) != KEY_SIZE:
        return False
    y = int.from_bytes(public_bytes, "little")
    x_sign = y >> 255
    y &= (1 << 255) - 1
    if y >= _P:
        return False

    u = (y * y - 1) % _P
    v = (_D * y * y + 1) % _P
    x = u * pow(v, 3, _P) * pow(u * pow(v, 7, _P), (_P - 5) // 8, _P) % _P
    vx2 = v * x * x % _P
    if vx2 == (-u) % _P:
        x = x * _SQRT_M1 % _P
    elif vx2 != u:
        return False

    return not (x == 0 and x_sign)


def _key_bytes(key: bytes, scheme: str) -> bytes:
    """Take the first 32 bytes of the key material."""
    if len(key) < KEY_SIZE:
        raise KeyFormatError(
            f"{scheme} key must be at least {KEY_SIZE} bytes, got {len(key)}"
        )
    return bytes(key[:KEY_SIZE])


class TextSigner(ABC):
    """Abstract base class for text signers."""

    @property
    @abstractmethod
    def format(self) -> TextSignFormat:
        """Get the signing scheme."""
        pass

    @abstractmethod
    def sign(self, reader: BinaryIO) -> bytes:
        """Sign the whole stream and return the raw signature."""
        pass


class TextVerifier(ABC):
    """Abstract base class for text verifiers."""

    @property
    @abstractmethod
    def format(self) -> TextSignFormat:
        """Get the signing scheme."""
        pass

    @abstractmethod
    def verify(self, reader: BinaryIO, signature: bytes) -> bool:
        """Verify a raw signature over the whole stream."""
        pass


class Blake3Signer(TextSigner, TextVerifier):
    """Blake3 keyed hash; the same key signs and verifies."""

    def __init__(self, key: bytes):
        self._key = _key_bytes(key, "Blake3")

    @property
    def format(self) -> TextSignFormat:
        return TextSignFormat.BLAKE3

    def _digest(self, data: bytes) -> bytes:
        return blake3.blake3(data, key=self._key).digest()

    def sign(self, reader: BinaryIO) -> bytes:
        data = read_stream(reader)
        return self._digest(data)

    def verify(self, reader: BinaryIO, signature: bytes) -> bool:
        if len(signature) != BLAKE3_SIGNATURE_SIZE:
            raise SignatureFormatError(
                f"Blake3 signature must be {BLAKE3_SIGNATURE_SIZE} bytes, got {len(signature)}"
            )
        data = read_stream(reader)
        return hmac.compare_digest(self._digest(data), bytes(signature))

    @staticmethod
    def generate(rng: Optional[RandomSource] = None) -> KeyBundle:
        """
        Generate a printable 32-byte Blake3 key.

        Args:
            rng: Callable returning n random bytes (defaults to the system CSPRNG)

        Returns:
            {"blake3.txt": key}
        """
        chooser = ByteSourceRandom(rng) if rng is not None else None
        key = generate_password(KEY_SIZE, True, True, True, True, rng=chooser)
        return {"blake3.txt": key.encode("ascii")}


class Ed25519Signer(TextSigner):
    """Ed25519 signer built from a 32-byte seed."""

    def __init__(self, key: bytes):
        seed = _key_bytes(key, "Ed25519 signing")
        self._private_key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)

    @property
    def format(self) -> TextSignFormat:
        return TextSignFormat.ED25519

    def sign(self, reader: BinaryIO) -> bytes:
        data = read_stream(reader)
        return self._private_key.sign(data)

    def get_public_key(self) -> bytes:
        return self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def get_private_key(self) -> bytes:
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    @classmethod
    def generate(cls, rng: Optional[RandomSource] = None) -> KeyBundle:
        """
        Generate a fresh Ed25519 key pair.

        Args:
            rng: Callable returning n random bytes (defaults to os.urandom)

        Returns:
            {"ed25519.sk": seed, "ed25519.pk": public key}
        """
        seed = (rng or os.urandom)(KEY_SIZE)
        signer = cls(seed)
        return {
            "ed25519.sk": signer.get_private_key(),
            "ed25519.pk": signer.get_public_key(),
        }


class Ed25519Verifier(TextVerifier):
    """Ed25519 verifier built from a 32-byte public key."""

    def __init__(self, key: bytes):
        public_bytes = _key_bytes(key, "Ed25519 verifying")
        if not is_valid_ed25519_point(public_bytes):
            raise KeyFormatError("Invalid Ed25519 public key: not a point on the curve")
        self._public_key = ed25519.Ed25519PublicKey.from_public_bytes(public_bytes)

    @property
    def format(self) -> TextSignFormat:
        return TextSignFormat.ED25519

    def verify(self, reader: BinaryIO, signature: bytes) -> bool:
        if len(signature) != ED25519_SIGNATURE_SIZE:
            raise SignatureFormatError(
                f"Ed25519 signature must be {ED25519_SIGNATURE_SIZE} bytes, got {len(signature)}"
            )
        data = read_stream(reader)
        try:
            self._public_key.verify(bytes(signature), data)
        except InvalidSignature:
            logger.debug("ed25519_signature_rejected", size=len(data))
            return False
        return True


def get_signer(format: TextSignFormat, key: bytes) -> TextSigner:
    """
    Factory function to get a signer instance.

    Args:
        format: Which scheme to use
        key: Raw key material (Blake3 key or Ed25519 seed)

    Returns:
        TextSigner instance
    """
    if format == TextSignFormat.BLAKE3:
        return Blake3Signer(key)
    elif format == TextSignFormat.ED25519:
        return Ed25519Signer(key)
    else:
        raise ValueError(f"Unknown format: {format}")


def get_verifier(format: TextSignFormat, key: bytes) -> TextVerifier:
    """
    Factory function to get a verifier instance.

    Args:
        format: Which scheme to use
        key: Raw key material (Blake3 key or Ed25519 public key)

    Returns:
        TextVerifier instance
    """
    if format == TextSignFormat.BLAKE3:
        return Blake3Signer(key)
    elif format == TextSignFormat.ED25519:
        return Ed25519Verifier(key)
    else:
        raise ValueError(f"Unknown format: {format}")
