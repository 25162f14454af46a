# regev_lwe/cryptography/practical.py
"""
Regev-LWE Practical Encryption

High-level API for text encryption, the boundary presentation code calls:

  - generate_keys / generate_keys_async / agenerate_keys
  - encrypt_text(pk, plaintext) -> EncryptionResult(ciphertext, stats)
  - decrypt_text(sk, ciphertext) -> plaintext, or DecodeError

Key generation is the O(m·n) hot path. generate_keys_async runs it on a
background executor and hands back a Future; there is no cancellation, a
caller that loses interest simply drops the result.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Optional

from .batch import BatchRegevLWE
from .common import (
    EncryptionResult,
    KeyPair,
    LWEParams,
    LWEPublicKey,
    LWESecretKey,
)
from .entropy import RandomSource


_keygen_executor: Optional[ThreadPoolExecutor] = None
_keygen_lock = threading.Lock()


def _get_keygen_executor() -> ThreadPoolExecutor:
    global _keygen_executor
    with _keygen_lock:
        if _keygen_executor is None:
            _keygen_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="regev-keygen")
        return _keygen_executor


def generate_keys(
    params: Optional[LWEParams] = None,
    rng: Optional[RandomSource] = None,
) -> KeyPair:
    """Generate a key pair (blocking)."""
    return BatchRegevLWE(params=params, rng=rng).key_gen()


def generate_keys_async(
    params: Optional[LWEParams] = None,
    rng: Optional[RandomSource] = None,
    executor: Optional[Executor] = None,
) -> Future[KeyPair]:
    """Generate a key pair on a background executor."""
    executor = executor if executor is not None else _get_keygen_executor()
    return executor.submit(generate_keys, params, rng)


async def agenerate_keys(
    params: Optional[LWEParams] = None,
    rng: Optional[RandomSource] = None,
    executor: Optional[Executor] = None,
) -> KeyPair:
    """Awaitable key generation for asyncio callers."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, generate_keys, params, rng)


def encrypt_text(
    pk: LWEPublicKey,
    plaintext: str,
    params: Optional[LWEParams] = None,
    rng: Optional[RandomSource] = None,
) -> EncryptionResult:
    """Encrypt a UTF-8 string under a public key."""
    return BatchRegevLWE(params=params, rng=rng).encrypt(pk, plaintext)


def decrypt_text(
    sk: LWESecretKey,
    ciphertext: str,
    params: Optional[LWEParams] = None,
) -> str:
    """Decrypt a transport string. Raises DecodeError."""
    return BatchRegevLWE(params=params).decrypt(sk, ciphertext)


class RegevPractical:
    """
    Session helper holding one key pair.

    Example:
        >>> session = RegevPractical()
        >>> session.key_gen()
        >>> result = session.encrypt("Hello LWE!")
        >>> session.decrypt(result.ciphertext)
        'Hello LWE!'
    """

    def __init__(
        self,
        params: Optional[LWEParams] = None,
        rng: Optional[RandomSource] = None,
        workers: Optional[int] = None,
    ):
        self._lwe = BatchRegevLWE(params=params, rng=rng, workers=workers)
        self._keys: Optional[KeyPair] = None

    @property
    def params(self) -> LWEParams:
        return self._lwe.params

    @property
    def public_key(self) -> Optional[LWEPublicKey]:
        return self._keys.pk if self._keys is not None else None

    def key_gen(self) -> None:
        """Generate (or replace) the session key pair."""
        self._keys = self._lwe.key_gen()

    def encrypt(self, plaintext: str, pk: Optional[LWEPublicKey] = None) -> EncryptionResult:
        """Encrypt for `pk`, or for this session's own public key."""
        if pk is None:
            if self._keys is None:
                raise ValueError("Public key not initialized")
            pk = self._keys.pk
        return self._lwe.encrypt(pk, plaintext)

    def decrypt(self, ciphertext: str) -> str:
        if self._keys is None:
            raise ValueError("Secret key not initialized")
        return self._lwe.decrypt(self._keys.sk, ciphertext)
