# regev_lwe/__init__.py
"""
Regev-LWE: Toy Learning-With-Errors Public-Key Cryptosystem

- Key generation: pk = (A, b = A @ s + e mod q), sk = s
- Bitwise encryption with a random binary combination of LWE samples
- Threshold decryption tolerating the accumulated noise e @ r
- Base64/JSON transport format for ciphertexts

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │  regev_lwe                                              │
    │  └── cryptography/                                      │
    │      ├── common.py     # Params, errors, data types     │
    │      ├── entropy.py    # RandomSource implementations   │
    │      ├── linalg.py     # Matrix/vector ops mod q        │
    │      ├── core.py       # RegevLWE (reference engine)    │
    │      ├── batch.py      # BatchRegevLWE (vectorized)     │
    │      ├── codec.py      # Transport string codec         │
    │      └── practical.py  # High-level text API            │
    └─────────────────────────────────────────────────────────┘

Reference parameters: q=3329, n=128, m=256, error bound 3.
Not hardened: no constant-time arithmetic, toy parameter sizes.
"""

__version__ = "1.0.0"

# =============================================================================
# Core Cryptography
# =============================================================================

from .cryptography.common import (
    Q_DEFAULT,
    N_DEFAULT,
    M_DEFAULT,
    ERROR_BOUND_DEFAULT,
    ALGORITHM_TAG,
    PARAM_PRESETS,
    DEFAULT_PARAMS,
    LWEParams,
    LWEError,
    ConfigurationError,
    PreconditionError,
    DecodeError,
    LWEPublicKey,
    LWESecretKey,
    KeyPair,
    EncryptedBlock,
    BitTrace,
    SerializedCiphertext,
    EncryptionResult,
)

from .cryptography.entropy import (
    RandomSource,
    SystemRandomSource,
    SeededRandomSource,
)

from .cryptography.core import RegevLWE
from .cryptography.batch import BatchRegevLWE

from .cryptography.codec import (
    encode_ciphertext,
    decode_ciphertext,
)

# =============================================================================
# Practical API
# =============================================================================

from .cryptography.practical import (
    RegevPractical,
    generate_keys,
    generate_keys_async,
    agenerate_keys,
    encrypt_text,
    decrypt_text,
)

# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # -------------------------------------------------------------------------
    # Practical API
    # -------------------------------------------------------------------------
    "RegevPractical",
    "generate_keys",
    "generate_keys_async",
    "agenerate_keys",
    "encrypt_text",
    "decrypt_text",

    # -------------------------------------------------------------------------
    # Engines
    # -------------------------------------------------------------------------
    "RegevLWE",
    "BatchRegevLWE",

    # -------------------------------------------------------------------------
    # Codec
    # -------------------------------------------------------------------------
    "encode_ciphertext",
    "decode_ciphertext",

    # -------------------------------------------------------------------------
    # Randomness
    # -------------------------------------------------------------------------
    "RandomSource",
    "SystemRandomSource",
    "SeededRandomSource",

    # -------------------------------------------------------------------------
    # Data Structures
    # -------------------------------------------------------------------------
    "LWEParams",
    "LWEPublicKey",
    "LWESecretKey",
    "KeyPair",
    "EncryptedBlock",
    "BitTrace",
    "SerializedCiphertext",
    "EncryptionResult",

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------
    "LWEError",
    "ConfigurationError",
    "PreconditionError",
    "DecodeError",

    # -------------------------------------------------------------------------
    # Constants
    # -------------------------------------------------------------------------
    "Q_DEFAULT",
    "N_DEFAULT",
    "M_DEFAULT",
    "ERROR_BOUND_DEFAULT",
    "ALGORITHM_TAG",
    "PARAM_PRESETS",
    "DEFAULT_PARAMS",
]


# =============================================================================
# Quick Status Check
# =============================================================================

def status() -> dict:
    """
    Get the active default configuration.

    Example:
        >>> import regev_lwe
        >>> regev_lwe.status()['q']
        3329
    """
    return {
        'version': __version__,
        'algorithm': ALGORITHM_TAG,
        'q': DEFAULT_PARAMS.q,
        'n': DEFAULT_PARAMS.n,
        'm': DEFAULT_PARAMS.m,
        'error_bound': DEFAULT_PARAMS.error_bound,
        'presets': sorted(PARAM_PRESETS),
    }
