# regev_lwe/cryptography/entropy.py
"""
Regev-LWE Randomness

RandomSource is the only non-deterministic dependency of the cryptosystem.
Subclasses provide one capability, uniform_int(max) in [0, max); the error
and binary samplers are derived from it.

Word Reduction:
  - Integers are drawn as little-endian uint32 words reduced mod max
  - SystemRandomSource and SeededRandomSource share this reduction, so a
    seeded source reproduces the exact sampling order of the system source
"""

from __future__ import annotations

import secrets
import threading
from abc import ABC, abstractmethod

import numpy as np

from .common import ConfigurationError, prg_sha256, require


_WORD_BYTES = 4
_BLOCK_BYTES = 32  # SHA-256 digest per PRG counter
_WORD_RANGE = 2 ** (8 * _WORD_BYTES)


class RandomSource(ABC):
    """Source of uniform integers."""

    @abstractmethod
    def uniform_int(self, max: int) -> int:
        """Return an integer uniform in [0, max)."""

    def uniform_ints(self, max: int, size: int) -> np.ndarray:
        """Return `size` independent draws of uniform_int(max), in order."""
        require(size >= 0, f"size must be non-negative, got {size}")
        return np.array([self.uniform_int(max) for _ in range(size)], dtype=np.int64)

    def symmetric_error(self, bound: int) -> int:
        """Return an integer uniform in [-bound, bound]."""
        require(bound >= 0, f"error bound must be non-negative, got {bound}")
        return self.uniform_int(2 * bound + 1) - bound

    def symmetric_errors(self, bound: int, size: int) -> np.ndarray:
        require(bound >= 0, f"error bound must be non-negative, got {bound}")
        return self.uniform_ints(2 * bound + 1, size) - bound

    def binary_vector(self, size: int) -> np.ndarray:
        return self.uniform_ints(2, size)


def _check_max(max: int) -> None:
    require(max >= 1, f"max must be positive, got {max}")
    require(max <= _WORD_RANGE, f"max must be at most 2**32, got {max}")


def _reduce_words(buf: bytes, max: int) -> np.ndarray:
    if not buf:
        return np.zeros(0, dtype=np.int64)
    words = np.frombuffer(buf, dtype="<u4").astype(np.int64)
    return words % max


class SystemRandomSource(RandomSource):
    """
    Operating-system CSPRNG (via `secrets`).

    Each call reads fresh entropy and keeps no state, so a single instance
    is safe to share between threads.
    """

    def __init__(self):
        try:
            secrets.token_bytes(_WORD_BYTES)
        except (NotImplementedError, OSError) as e:
            raise ConfigurationError("System entropy source unavailable") from e

    def uniform_int(self, max: int) -> int:
        _check_max(max)
        word = int.from_bytes(secrets.token_bytes(_WORD_BYTES), "little")
        return word % max

    def uniform_ints(self, max: int, size: int) -> np.ndarray:
        _check_max(max)
        require(size >= 0, f"size must be non-negative, got {size}")
        return _reduce_words(secrets.token_bytes(_WORD_BYTES * size), max)


class SeededRandomSource(RandomSource):
    """
    Deterministic source: SHA-256 counter-mode word stream.

    For tests and reproducible demos only. Two instances built from the
    same seed yield the same sequence of integers.
    """

    def __init__(self, seed: bytes, domain: bytes = b"regev-lwe-entropy"):
        self.seed = bytes(seed)
        self.domain = domain
        self._pos = 0  # words consumed
        self._lock = threading.Lock()

    def _take(self, count: int) -> bytes:
        with self._lock:
            offset = self._pos * _WORD_BYTES
            self._pos += count
        block, skip = divmod(offset, _BLOCK_BYTES)
        buf = prg_sha256(self.seed, skip + count * _WORD_BYTES, self.domain, start=block)
        return buf[skip:]

    def uniform_int(self, max: int) -> int:
        _check_max(max)
        return int.from_bytes(self._take(1), "little") % max

    def uniform_ints(self, max: int, size: int) -> np.ndarray:
        _check_max(max)
        require(size >= 0, f"size must be non-negative, got {size}")
        return _reduce_words(self._take(size), max)


_default_source = None


def default_source() -> RandomSource:
    """Process-wide SystemRandomSource, created on first use."""
    global _default_source
    if _default_source is None:
        _default_source = SystemRandomSource()
    return _default_source
