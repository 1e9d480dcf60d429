"""
Tests for Password Generation
"""

import random
import pytest
from textcrypt.passwords import (
    LOWER,
    NUMBER,
    SYMBOL,
    UPPER,
    ByteSourceRandom,
    generate_password,
)


class TestGeneratePassword:
    """Test the password generator."""

    def test_default_length(self):
        assert len(generate_password()) == 16

    def test_all_classes_present(self, seeded_chooser):
        for _ in range(20):
            password = generate_password(8, rng=seeded_chooser)
            assert any(c in UPPER for c in password)
            assert any(c in LOWER for c in password)
            assert any(c in NUMBER for c in password)
            assert any(c in SYMBOL for c in password)

    def test_disabled_classes_absent(self):
        password = generate_password(64, upper=False, symbol=False)

        assert not any(c in UPPER for c in password)
        assert not any(c in SYMBOL for c in password)
        assert all(c in LOWER + NUMBER for c in password)

    def test_seeded_generation_is_repeatable(self):
        assert (
            generate_password(32, rng=random.Random(5))
            == generate_password(32, rng=random.Random(5))
        )

    def test_no_classes(self):
        with pytest.raises(ValueError):
            generate_password(16, upper=False, lower=False, number=False, symbol=False)

    def test_too_short_for_classes(self):
        with pytest.raises(ValueError):
            generate_password(3)


class TestByteSourceRandom:
    """Chooser backed by an injected byte source."""

    def test_same_bytes_same_password(self):
        a = ByteSourceRandom(random.Random(3).randbytes)
        b = ByteSourceRandom(random.Random(3).randbytes)

        assert generate_password(32, rng=a) == generate_password(32, rng=b)

    def test_getrandbits_width(self):
        chooser = ByteSourceRandom(lambda n: b"\xff" * n)

        assert chooser.getrandbits(5) == 31
        assert chooser.getrandbits(0) == 0

    def test_random_in_unit_interval(self):
        chooser = ByteSourceRandom(lambda n: b"\xff" * n)

        assert 0.0 <= chooser.random() < 1.0

    def test_no_state(self):
        with pytest.raises(NotImplementedError):
            ByteSourceRandom(lambda n: b"\x00" * n).getstate()
