"""
Tests for the text processing entry points

End-to-end properties of sign/verify/generate/encrypt/decrypt through the
format-tag dispatch.
"""

import io
import random
import pytest
from textcrypt.errors import CryptoError, KeyFormatError, SignatureFormatError
from textcrypt.process import (
    process_text_decrypt,
    process_text_encrypt,
    process_text_encrypt_key_generate,
    process_text_key_generate,
    process_text_sign,
    process_text_verify,
)
from textcrypt.signer import TextSignFormat

ALL_FORMATS = [TextSignFormat.BLAKE3, TextSignFormat.ED25519]


def signing_keys(format: TextSignFormat):
    """Return (signing key, verifying key) for a format."""
    bundle = process_text_key_generate(format)
    if format == TextSignFormat.BLAKE3:
        return bundle["blake3.txt"], bundle["blake3.txt"]
    return bundle["ed25519.sk"], bundle["ed25519.pk"]


class TestSignVerify:
    """Sign/verify through the dispatcher."""

    @pytest.mark.parametrize("format", ALL_FORMATS)
    @pytest.mark.parametrize("data", [b"", b"hello", bytes(range(256)) * 40])
    def test_verify_accepts_own_signature(self, format, data):
        sk, pk = signing_keys(format)
        signature = process_text_sign(io.BytesIO(data), sk, format)

        assert process_text_verify(io.BytesIO(data), pk, signature, format) is True

    @pytest.mark.parametrize("format", ALL_FORMATS)
    def test_mutated_input_rejected(self, format):
        sk, pk = signing_keys(format)
        signature = process_text_sign(io.BytesIO(b"hello"), sk, format)

        assert process_text_verify(io.BytesIO(b"hellp"), pk, signature, format) is False

    @pytest.mark.parametrize("format", ALL_FORMATS)
    def test_short_key_rejected_on_sign_and_verify(self, format):
        short_key = b"\x00" * 31

        with pytest.raises(KeyFormatError):
            process_text_sign(io.BytesIO(b"data"), short_key, format)
        with pytest.raises(KeyFormatError):
            process_text_verify(io.BytesIO(b"data"), short_key, b"\x00" * 64, format)

    @pytest.mark.parametrize("format,bad_length", [
        (TextSignFormat.BLAKE3, 64),
        (TextSignFormat.ED25519, 32),
    ])
    def test_wrong_signature_length(self, format, bad_length):
        _, pk = signing_keys(format)

        with pytest.raises(SignatureFormatError):
            process_text_verify(io.BytesIO(b"data"), pk, b"\x00" * bad_length, format)

    def test_blake3_hello_scenario(self, zero_key):
        """32 zero-byte key: stable signature, "hellp" differs and fails."""
        fmt = TextSignFormat.BLAKE3
        sig1 = process_text_sign(io.BytesIO(b"hello"), zero_key, fmt)
        sig2 = process_text_sign(io.BytesIO(b"hello"), zero_key, fmt)
        sig3 = process_text_sign(io.BytesIO(b"hellp"), zero_key, fmt)

        assert len(sig1) == 32
        assert sig1 == sig2
        assert len(sig3) == 32
        assert sig3 != sig1
        assert process_text_verify(io.BytesIO(b"hellp"), zero_key, sig1, fmt) is False

    def test_blake3_and_ed25519_differ(self, zero_key):
        blake = process_text_sign(io.BytesIO(b"x"), zero_key, TextSignFormat.BLAKE3)
        ed = process_text_sign(io.BytesIO(b"x"), zero_key, TextSignFormat.ED25519)

        assert len(blake) == 32
        assert len(ed) == 64


class TestKeyGenerate:
    """Key generation through the dispatcher."""

    def test_blake3_bundle(self):
        bundle = process_text_key_generate(TextSignFormat.BLAKE3)

        assert list(bundle) == ["blake3.txt"]
        assert len(bundle["blake3.txt"]) == 32

    def test_ed25519_bundle(self):
        bundle = process_text_key_generate(TextSignFormat.ED25519)

        assert sorted(bundle) == ["ed25519.pk", "ed25519.sk"]
        assert all(len(v) == 32 for v in bundle.values())

    def test_generated_keys_are_unique(self):
        a = process_text_key_generate(TextSignFormat.ED25519)
        b = process_text_key_generate(TextSignFormat.ED25519)

        assert a["ed25519.sk"] != b["ed25519.sk"]

    @pytest.mark.parametrize("format", ALL_FORMATS)
    def test_single_byte_source_drives_both_formats(self, format):
        """One injected byte source works for every scheme and is repeatable."""
        def source(seed):
            rng = random.Random(seed)
            return lambda n: bytes(rng.getrandbits(8) for _ in range(n))

        bundle_a = process_text_key_generate(format, rng=source(99))
        bundle_b = process_text_key_generate(format, rng=source(99))

        assert bundle_a == bundle_b
        assert all(len(v) == 32 for v in bundle_a.values())

    def test_seeded_blake3_key_signs(self, seeded_rng):
        key = process_text_key_generate(TextSignFormat.BLAKE3, rng=seeded_rng)["blake3.txt"]
        signature = process_text_sign(io.BytesIO(b"hello"), key, TextSignFormat.BLAKE3)

        assert key.decode("ascii").isprintable()
        assert process_text_verify(io.BytesIO(b"hello"), key, signature, TextSignFormat.BLAKE3)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            process_text_key_generate("ed448")


class TestEncryptDecrypt:
    """Encryption through the dispatcher."""

    @pytest.mark.parametrize("plaintext", [b"", b"hello", "héllo wörld".encode("utf-8"), b"\x00" * 5000])
    def test_round_trip(self, plaintext):
        key = process_text_encrypt_key_generate()["chacha20poly1305.key"]
        ciphertext = process_text_encrypt(io.BytesIO(plaintext), key)

        assert process_text_decrypt(io.BytesIO(ciphertext), key) == plaintext

    def test_deterministic_with_seeded_rng(self):
        def source(seed):
            rng = random.Random(seed)
            return lambda n: bytes(rng.getrandbits(8) for _ in range(n))

        key = bytes(32)
        ct1 = process_text_encrypt(io.BytesIO(b"msg"), key, rng=source(1))
        ct2 = process_text_encrypt(io.BytesIO(b"msg"), key, rng=source(1))

        assert ct1 == ct2

    def test_decrypt_with_other_key_fails(self):
        key = process_text_encrypt_key_generate()["chacha20poly1305.key"]
        other = process_text_encrypt_key_generate()["chacha20poly1305.key"]
        ciphertext = process_text_encrypt(io.BytesIO(b"secret"), key)

        with pytest.raises(CryptoError):
            process_text_decrypt(io.BytesIO(ciphertext), other)
