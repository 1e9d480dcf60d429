"""
Pytest Configuration and Fixtures
"""

import os
import random
import sys
import pytest
import structlog
import tempfile

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), 'src'))

# Set test environment
os.environ["TEXTCRYPT_LOG_LEVEL"] = "WARNING"
os.environ["TEXTCRYPT_DEFAULT_FORMAT"] = "blake3"


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI binds structlog to the current stderr; undo that after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def temp_keys_dir():
    """Create a temporary directory for generated keys."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def zero_key():
    """32 zero bytes, usable as a Blake3 key or Ed25519 seed."""
    return bytes(32)


@pytest.fixture
def seeded_rng():
    """Deterministic byte source for key and nonce generation."""
    rng = random.Random(1234)
    return lambda n: bytes(rng.getrandbits(8) for _ in range(n))


@pytest.fixture
def seeded_chooser():
    """Deterministic chooser for password generation."""
    return random.Random(1234)
