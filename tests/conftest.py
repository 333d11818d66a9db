"""
Test bootstrap:
- Make tests/helpers importable at collect-time
- Shared buffers and deterministic randomness
"""
import os
import sys
import random
import pathlib
import pytest

TESTS_DIR = pathlib.Path(__file__).parent.resolve()

if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))


@pytest.fixture
def rng():
    """Deterministic random source; override the seed with TLV_FUZZ_SEED."""
    return random.Random(int(os.environ.get("TLV_FUZZ_SEED", "1337")))


@pytest.fixture
def zero_buffer():
    """A freshly allocated 64-byte TLV region."""
    return bytearray(64)


@pytest.fixture
def account_base():
    """A non-zero 165-byte token account base record."""
    return bytes((i * 7 + 1) % 256 for i in range(165))


@pytest.fixture
def mint_base():
    """A non-zero 82-byte mint base record."""
    return bytes((i * 3 + 5) % 256 for i in range(82))
