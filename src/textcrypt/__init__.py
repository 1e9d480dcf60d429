"""
textcrypt - Text signing, verification and encryption

Supports:
- Blake3 keyed hash signatures
- Ed25519 signatures
- ChaCha20-Poly1305 authenticated encryption
"""

from .errors import (
    TextCryptError,
    KeyFormatError,
    SignatureFormatError,
    CryptoError,
    StreamIOError,
)
from .signer import (
    TextSignFormat,
    TextSigner,
    TextVerifier,
    Blake3Signer,
    Ed25519Signer,
    Ed25519Verifier,
    get_signer,
    get_verifier,
)
from .encryptor import ChaCha20Poly1305Encryptor
from .process import (
    process_text_sign,
    process_text_verify,
    process_text_key_generate,
    process_text_encrypt_key_generate,
    process_text_encrypt,
    process_text_decrypt,
)

__all__ = [
    "TextCryptError",
    "KeyFormatError",
    "SignatureFormatError",
    "CryptoError",
    "StreamIOError",
    "TextSignFormat",
    "TextSigner",
    "TextVerifier",
    "Blake3Signer",
    "Ed25519Signer",
    "Ed25519Verifier",
    "get_signer",
    "get_verifier",
    "ChaCha20Poly1305Encryptor",
    "process_text_sign",
    "process_text_verify",
    "process_text_key_generate",
    "process_text_encrypt_key_generate",
    "process_text_encrypt",
    "process_text_decrypt",
]
