"""
Text Processing Entry Points

The only functions callers need: pick the scheme from a format tag,
construct it for this one call, and run it. Nothing is cached between
calls.
"""

from typing import BinaryIO, Optional
import structlog

from .encryptor import ChaCha20Poly1305Encryptor
from .signer import (
    Blake3Signer,
    Ed25519Signer,
    KeyBundle,
    RandomSource,
    TextSignFormat,
    get_signer,
    get_verifier,
)

logger = structlog.get_logger()


def process_text_sign(reader: BinaryIO, key: bytes, format: TextSignFormat) -> bytes:
    """Sign the stream with the given scheme and key."""
    signer = get_signer(format, key)
    signature = signer.sign(reader)
    logger.info("text_signed", format=format.value, signature_size=len(signature))
    return signature


def process_text_verify(
    reader: BinaryIO,
    key: bytes,
    signature: bytes,
    format: TextSignFormat,
) -> bool:
    """Verify a raw signature; False on mismatch, raises on malformed input."""
    verifier = get_verifier(format, key)
    valid = verifier.verify(reader, signature)
    logger.info("text_verified", format=format.value, valid=valid)
    return valid


def process_text_key_generate(
    format: TextSignFormat,
    rng: Optional[RandomSource] = None,
) -> KeyBundle:
    """
    Generate key material for a signing scheme.

    Args:
        format: Which scheme to generate for
        rng: Callable returning n random bytes, used by both schemes
             (defaults to the system CSPRNG)

    Returns:
        Mapping of logical filename to raw key bytes
    """
    if format == TextSignFormat.BLAKE3:
        bundle = Blake3Signer.generate(rng)
    elif format == TextSignFormat.ED25519:
        bundle = Ed25519Signer.generate(rng)
    else:
        raise ValueError(f"Unknown format: {format}")

    logger.info("key_bundle_generated", format=format.value, files=sorted(bundle))
    return bundle


def process_text_encrypt_key_generate(rng: Optional[RandomSource] = None) -> KeyBundle:
    """Generate a ChaCha20-Poly1305 key file bundle."""
    bundle = ChaCha20Poly1305Encryptor.generate(rng)
    logger.info("key_bundle_generated", format="chacha20poly1305", files=sorted(bundle))
    return bundle


def process_text_encrypt(
    reader: BinaryIO,
    key: bytes,
    rng: Optional[RandomSource] = None,
) -> bytes:
    """Encrypt the stream; output is nonce + ciphertext + tag."""
    encryptor = ChaCha20Poly1305Encryptor(key, rng=rng)
    return encryptor.encrypt(reader)


def process_text_decrypt(reader: BinaryIO, key: bytes) -> bytes:
    """Decrypt a stream produced by process_text_encrypt under the same key."""
    encryptor = ChaCha20Poly1305Encryptor(key)
    return encryptor.decrypt(reader)
