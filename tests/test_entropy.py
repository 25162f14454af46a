# tests/test_entropy.py
"""
Regev-LWE Randomness Tests

Categories:
  R1. Ranges (uniform, symmetric error, binary)
  R2. Seeded determinism and stream order
  R3. Failure modes (bad bounds, missing entropy)
"""

import secrets
from collections import Counter

import numpy as np
import pytest

from regev_lwe.cryptography import entropy
from regev_lwe.cryptography.common import ConfigurationError, PreconditionError
from regev_lwe.cryptography.entropy import (
    RandomSource,
    SeededRandomSource,
    SystemRandomSource,
)


class CountingSource(RandomSource):
    """Minimal source: only the required capability."""

    def __init__(self):
        self.calls = 0

    def uniform_int(self, max):
        self.calls += 1
        return (self.calls * 7) % max


# =============================================================================
# R1. Ranges
# =============================================================================

def test_r1_1_system_uniform_range():
    print("\n[R1.1] SystemRandomSource.uniform_int(s) in [0, max)")
    rng = SystemRandomSource()
    values = rng.uniform_ints(3329, 5000)
    assert values.dtype == np.int64
    assert values.min() >= 0 and values.max() < 3329
    for _ in range(100):
        assert 0 <= rng.uniform_int(10) < 10


def test_r1_2_symmetric_error_covers_range():
    print("\n[R1.2] symmetric_error covers [-3, 3] and nothing else")
    rng = SystemRandomSource()
    counts = Counter(rng.symmetric_errors(3, 7000).tolist())
    assert set(counts) == {-3, -2, -1, 0, 1, 2, 3}
    for _ in range(50):
        assert -3 <= rng.symmetric_error(3) <= 3


def test_r1_3_binary_vector():
    print("\n[R1.3] binary_vector yields 0/1")
    v = SystemRandomSource().binary_vector(512)
    assert v.shape == (512,)
    assert set(np.unique(v).tolist()) <= {0, 1}


def test_r1_4_base_class_defaults():
    print("\n[R1.4] Derived samplers only need uniform_int")
    src = CountingSource()
    v = src.uniform_ints(5, 4)
    assert v.tolist() == [2, 4, 1, 3]
    assert src.symmetric_error(2) == (5 * 7) % 5 - 2
    assert src.binary_vector(3).shape == (3,)


# =============================================================================
# R2. Seeded Determinism
# =============================================================================

def test_r2_1_same_seed_same_stream():
    print("\n[R2.1] Same seed -> same integers")
    a = SeededRandomSource(b"seed-1")
    b = SeededRandomSource(b"seed-1")
    c = SeededRandomSource(b"seed-2")
    xa = a.uniform_ints(3329, 100)
    assert np.array_equal(xa, b.uniform_ints(3329, 100))
    assert not np.array_equal(xa, c.uniform_ints(3329, 100))


def test_r2_2_vector_draws_match_scalar_draws():
    print("\n[R2.2] uniform_ints(k) consumes the stream like k uniform_int calls")
    a = SeededRandomSource(b"order")
    b = SeededRandomSource(b"order")
    a.uniform_int(11)
    b.uniform_int(11)
    vec = a.uniform_ints(97, 21).tolist()
    scalars = [b.uniform_int(97) for _ in range(21)]
    assert vec == scalars
    assert a.uniform_int(1000) == b.uniform_int(1000)


def test_r2_3_zero_size():
    print("\n[R2.3] Empty draws")
    assert SeededRandomSource(b"x").uniform_ints(5, 0).shape == (0,)
    assert SystemRandomSource().uniform_ints(5, 0).shape == (0,)


# =============================================================================
# R3. Failure Modes
# =============================================================================

def test_r3_1_bad_bounds():
    print("\n[R3.1] Invalid bounds are precondition failures")
    rng = SystemRandomSource()
    with pytest.raises(PreconditionError):
        rng.uniform_int(0)
    with pytest.raises(PreconditionError):
        rng.uniform_ints(0, 3)
    with pytest.raises(PreconditionError):
        rng.symmetric_error(-1)
    with pytest.raises(PreconditionError):
        SeededRandomSource(b"x").uniform_ints(2, -1)
    for src in (rng, SeededRandomSource(b"x")):
        assert src.uniform_ints(2 ** 32, 1).shape == (1,)
        with pytest.raises(PreconditionError):
            src.uniform_int(2 ** 32 + 1)
        with pytest.raises(PreconditionError):
            src.uniform_ints(2 ** 40, 5)


def test_r3_2_missing_entropy_is_configuration_error(monkeypatch):
    print("\n[R3.2] Unavailable entropy -> ConfigurationError")

    def no_entropy(n):
        raise NotImplementedError("no os.urandom")

    monkeypatch.setattr(secrets, "token_bytes", no_entropy)
    monkeypatch.setattr(entropy, "_default_source", None)
    with pytest.raises(ConfigurationError):
        SystemRandomSource()
    with pytest.raises(ConfigurationError):
        entropy.default_source()


# =============================================================================
# Runner
# =============================================================================

def run_all_tests() -> None:
    tests = [
        v for k, v in sorted(globals().items())
        if k.startswith("test_") and v.__code__.co_argcount == 0
    ]
    for test in tests:
        test()
    print(f"\nAll {len(tests)} entropy tests passed")


if __name__ == "__main__":
    run_all_tests()
