# regev_lwe/cryptography/common.py
"""
Regev-LWE Common Components

Shared constants, parameters, errors and data structures for the Regev-LWE
cryptosystem.

Ring Convention:
  - All ring values are canonical representatives in [0, q)
  - Vectors and matrices are numpy int64 arrays (headroom for sums of products)
  - Bit order is most-significant-bit first within each byte
"""

from __future__ import annotations

import hashlib
import logging
import struct
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import numpy as np


logger = logging.getLogger("regev-lwe")


# =============================================================================
# Constants
# =============================================================================

Q_DEFAULT: int = 3329  # prime modulus
N_DEFAULT: int = 128
M_DEFAULT: int = 256
ERROR_BOUND_DEFAULT: int = 3
STATS_LIMIT_DEFAULT: int = 20
Q_MAX: int = 2 ** 31  # samplers draw one uint32 word per integer

ALGORITHM_TAG: str = "LWE-Regev"

PARAM_PRESETS: Dict[str, Dict[str, int]] = {
    "toy": {"n": 16, "m": 32, "q": Q_DEFAULT, "error_bound": ERROR_BOUND_DEFAULT},
    "browser": {"n": N_DEFAULT, "m": M_DEFAULT, "q": Q_DEFAULT, "error_bound": ERROR_BOUND_DEFAULT},
    "standard": {"n": 256, "m": 512, "q": Q_DEFAULT, "error_bound": ERROR_BOUND_DEFAULT},
}


# =============================================================================
# Errors
# =============================================================================

class LWEError(Exception):
    """Base class for Regev-LWE errors."""


class ConfigurationError(LWEError):
    """The system cannot operate (e.g. no entropy source)."""


class PreconditionError(LWEError, AssertionError):
    """
    Operand shapes or sampling bounds violate a function contract.

    This is a caller bug, never a user-facing condition.
    """


class DecodeError(LWEError, ValueError):
    """Ciphertext could not be decoded or decrypted."""


ERR_BASE64 = "Ciphertext is not valid base64"
ERR_STRUCTURE = "Ciphertext is not a well-formed block sequence"
ERR_BLOCK_SHAPE = "Ciphertext block does not match the secret key dimension"
ERR_UTF8 = "Decrypted bytes are not valid UTF-8"


def require(condition: bool, message: str) -> None:
    """Raise PreconditionError unless condition holds."""
    if not condition:
        raise PreconditionError(message)


# =============================================================================
# Parameters
# =============================================================================

@dataclass(frozen=True)
class LWEParams:
    """
    Immutable system configuration.

    The decryption thresholds (center_threshold, quarter_q) are fixed
    formulas tuned for error_bound=3 and m=256. Changing q, m or
    error_bound requires re-deriving them so that noise_bound() stays
    well below quarter_q.
    """
    q: int = Q_DEFAULT
    n: int = N_DEFAULT
    m: int = M_DEFAULT
    error_bound: int = ERROR_BOUND_DEFAULT
    stats_limit: int = STATS_LIMIT_DEFAULT
    algorithm: str = ALGORITHM_TAG

    def __post_init__(self):
        if self.q < 4:
            raise ValueError(f"Modulus q must be at least 4, got {self.q}")
        if self.q > Q_MAX:
            raise ValueError(f"Modulus q must be at most 2**31, got {self.q}")
        if self.n < 1 or self.m < 1:
            raise ValueError(f"Dimensions must be positive, got n={self.n}, m={self.m}")
        if max(self.n, self.m) * (self.q - 1) ** 2 >= 2 ** 63:
            raise ValueError("Parameters overflow int64 in mod-q products")
        if self.error_bound < 0:
            raise ValueError("Parameter error_bound must be non-negative")
        if self.stats_limit < 0:
            raise ValueError("Parameter stats_limit must be non-negative")

    @property
    def half_q(self) -> int:
        return self.q // 2

    @property
    def quarter_q(self) -> int:
        return self.q // 4

    @property
    def center_threshold(self) -> int:
        return self.q - self.q // 4

    def noise_bound(self) -> int:
        """Worst-case magnitude of e·r for a binary r."""
        return self.m * self.error_bound

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "LWEParams":
        """Build parameters from a named preset."""
        if name not in PARAM_PRESETS:
            raise ValueError(f"Unknown parameter preset: {name}")
        values = dict(PARAM_PRESETS[name])
        values.update(overrides)
        return cls(**values)


DEFAULT_PARAMS = LWEParams()


# =============================================================================
# Utility Functions
# =============================================================================

def _sha256(*chunks: bytes) -> bytes:
    """Compute SHA-256 hash of concatenated inputs."""
    h = hashlib.sha256()
    for c in chunks:
        h.update(c)
    return h.digest()


def prg_sha256(seed: bytes, out_len: int, domain: bytes = b"prg", start: int = 0) -> bytes:
    """
    Deterministic PRG using SHA-256 in counter mode.

    `start` selects the first counter block, so a stream can be resumed.
    """
    out = bytearray()
    ctr = start
    while len(out) < out_len:
        out.extend(_sha256(domain, seed, struct.pack("<I", ctr)))
        ctr += 1
    return bytes(out[:out_len])


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Expand bytes to bits, most-significant bit first."""
    if not data:
        return np.zeros(0, dtype=np.int64)
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8))
    return bits.astype(np.int64)


def bits_to_bytes(bits: Any) -> bytes:
    """Pack bits MSB first; a trailing partial byte is zero-padded."""
    return np.packbits(np.asarray(bits, dtype=np.uint8)).tobytes()


def as_vector(x: Any) -> np.ndarray:
    return np.asarray(x, dtype=np.int64)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class LWEPublicKey:
    """
    LWE public key.

      - A (m×n): uniform in [0, q)
      - b (m,):  A @ s + e mod q, e discarded after key_gen
    """
    A: np.ndarray
    b: np.ndarray

    @property
    def m(self) -> int:
        return int(self.A.shape[0])

    @property
    def n(self) -> int:
        return int(self.A.shape[1])


@dataclass
class LWESecretKey:
    """LWE secret key: small vector s in [-error_bound, error_bound]^n."""
    s: np.ndarray

    def __repr__(self) -> str:
        return f"LWESecretKey(n={len(self.s)})"


@dataclass
class KeyPair:
    pk: LWEPublicKey
    sk: LWESecretKey


@dataclass(frozen=True)
class EncryptedBlock:
    """
    One ciphertext block per plaintext bit: (u, v)

      - u (n,): A.T @ r mod q
      - v:      b @ r + bit * floor(q/2) mod q
    """
    u: np.ndarray
    v: int

    def __post_init__(self):
        u = np.array(self.u, dtype=np.int64)
        u.setflags(write=False)
        object.__setattr__(self, "u", u)
        object.__setattr__(self, "v", int(self.v))

    def to_dict(self) -> Dict[str, Any]:
        return {"u": self.u.tolist(), "v": self.v}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EncryptedBlock):
            return NotImplemented
        return self.v == other.v and np.array_equal(self.u, other.u)


@dataclass(frozen=True)
class BitTrace:
    """Per-bit diagnostics for observability; no effect on correctness."""
    bit_index: int
    original_bit: int
    v_raw: int
    v_prime: int
    encoded: int


@dataclass(frozen=True)
class SerializedCiphertext:
    """
    Ciphertext container.

    Wire structure (see codec.py):
      {"blocks": [{"u": [...], "v": int}, ...],
       "meta": {"timestamp": int, "algorithm": str}}
    """
    blocks: Tuple[EncryptedBlock, ...] = ()
    timestamp: int = 0
    algorithm: str = ALGORITHM_TAG

    def __post_init__(self):
        object.__setattr__(self, "blocks", tuple(self.blocks))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "blocks": [block.to_dict() for block in self.blocks],
            "meta": {"timestamp": self.timestamp, "algorithm": self.algorithm},
        }


@dataclass(frozen=True)
class EncryptionResult:
    ciphertext: str
    stats: Tuple[BitTrace, ...] = field(default_factory=tuple)
