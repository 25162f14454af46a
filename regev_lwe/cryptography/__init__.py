# regev_lwe/cryptography/__init__.py
"""
Regev-LWE Cryptography Module

PKE Design:
  - Public key (A, b = A @ s + e) allows encryption
  - Secret key (s) required for decryption
  - One (u, v) block per plaintext bit, MSB first

Wire Format:
  - base64(compact JSON {"blocks": [...], "meta": {...}})
"""

# Common utilities and data structures
from .common import (
    # Constants
    Q_DEFAULT,
    Q_MAX,
    N_DEFAULT,
    M_DEFAULT,
    ERROR_BOUND_DEFAULT,
    ALGORITHM_TAG,
    PARAM_PRESETS,
    DEFAULT_PARAMS,
    # Configuration
    LWEParams,
    # Errors
    LWEError,
    ConfigurationError,
    PreconditionError,
    DecodeError,
    # Utilities
    bytes_to_bits,
    bits_to_bytes,
    prg_sha256,
    # Data structures
    LWEPublicKey,
    LWESecretKey,
    KeyPair,
    EncryptedBlock,
    BitTrace,
    SerializedCiphertext,
    EncryptionResult,
)

# Randomness
from .entropy import (
    RandomSource,
    SystemRandomSource,
    SeededRandomSource,
    default_source,
)

# Modular linear algebra
from .linalg import (
    mod_q,
    mat_vec_mul,
    mat_trans_vec_mul,
    mat_trans_mat_mul,
    vec_dot,
    vec_add,
)

# Transport codec
from .codec import (
    encode_ciphertext,
    decode_ciphertext,
    ciphertext_from_dict,
    ciphertext_to_json,
)

# Core
from .core import RegevLWE, decode_bit, decode_bits

# Batch
from .batch import BatchRegevLWE

# Practical encryption
from .practical import (
    RegevPractical,
    generate_keys,
    generate_keys_async,
    agenerate_keys,
    encrypt_text,
    decrypt_text,
)

__all__ = [
    # Core
    "RegevLWE",
    "BatchRegevLWE",
    "decode_bit",
    "decode_bits",
    # Practical
    "RegevPractical",
    "generate_keys",
    "generate_keys_async",
    "agenerate_keys",
    "encrypt_text",
    "decrypt_text",
    # Codec
    "encode_ciphertext",
    "decode_ciphertext",
    "ciphertext_from_dict",
    "ciphertext_to_json",
    # Linear algebra
    "mod_q",
    "mat_vec_mul",
    "mat_trans_vec_mul",
    "mat_trans_mat_mul",
    "vec_dot",
    "vec_add",
    # Randomness
    "RandomSource",
    "SystemRandomSource",
    "SeededRandomSource",
    "default_source",
    # Data structures
    "LWEPublicKey",
    "LWESecretKey",
    "KeyPair",
    "EncryptedBlock",
    "BitTrace",
    "SerializedCiphertext",
    "EncryptionResult",
    # Configuration
    "LWEParams",
    "PARAM_PRESETS",
    "DEFAULT_PARAMS",
    # Errors
    "LWEError",
    "ConfigurationError",
    "PreconditionError",
    "DecodeError",
    # Common
    "Q_DEFAULT",
    "Q_MAX",
    "N_DEFAULT",
    "M_DEFAULT",
    "ERROR_BOUND_DEFAULT",
    "ALGORITHM_TAG",
    "bytes_to_bits",
    "bits_to_bytes",
    "prg_sha256",
]
