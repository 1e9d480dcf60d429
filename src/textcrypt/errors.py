"""
Error types for textcrypt

Structural problems (bad key length, bad signature length, unreadable
input, AEAD failures) raise. A signature that simply does not match is
not an error: verifiers return False for it.
"""


class TextCryptError(Exception):
    """Base class for all textcrypt failures."""
    pass


class KeyFormatError(TextCryptError):
    """Raised when key material has the wrong length or cannot be decoded."""
    pass


class SignatureFormatError(TextCryptError):
    """Raised when a signature has the wrong length for its scheme."""
    pass


class CryptoError(TextCryptError):
    """Raised when an AEAD seal or open fails (including tag mismatch)."""
    pass


class StreamIOError(TextCryptError, OSError):
    """Raised when an input stream cannot be read."""
    pass
