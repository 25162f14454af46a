# regev_lwe/cryptography/batch.py
"""
Regev-LWE Batch Engine

Vectorized encryption/decryption for long messages.

Each bit's block depends only on the public key and its own random vector
r, so bits are processed in chunks as matrix products:

    R (chunk×m) binary,  U = R @ A mod q,  V = R @ b mod q

Random vectors are drawn in bit order from the same RandomSource calls the
reference engine makes, so with a SeededRandomSource both engines emit
identical blocks. With workers > 1 the chunk products run on a thread pool;
block order always follows bit order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .common import (
    BitTrace,
    EncryptedBlock,
    LWEParams,
    LWEPublicKey,
    LWESecretKey,
    as_vector,
    logger,
)
from .core import RegevLWE, decode_bits
from .entropy import RandomSource
from .linalg import mat_trans_mat_mul, mat_vec_mul, mod_q


DEFAULT_CHUNK_SIZE: int = 256


class BatchRegevLWE(RegevLWE):
    """
    Chunked, vectorized Regev LWE.

    Args:
        params: System configuration
        rng: Randomness source
        chunk_size: Bits per matrix product
        workers: Thread pool size for chunk products (None/1 = inline)
    """

    def __init__(
        self,
        params: Optional[LWEParams] = None,
        rng: Optional[RandomSource] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        workers: Optional[int] = None,
    ):
        super().__init__(params=params, rng=rng)
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if workers is not None and workers < 1:
            raise ValueError("workers must be positive")
        self.chunk_size = int(chunk_size)
        self.workers = workers

    def _random_chunks(self, total: int) -> Iterator[np.ndarray]:
        m = self.params.m
        for start in range(0, total, self.chunk_size):
            rows = min(self.chunk_size, total - start)
            yield self.rng.binary_vector(rows * m).reshape(rows, m)

    def _encrypt_chunk(self, pk: LWEPublicKey, R: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        q = self.params.q
        return mat_trans_mat_mul(pk.A, R, q), mat_vec_mul(R, pk.b, q)

    def encrypt_bits(
        self,
        pk: LWEPublicKey,
        bits: Iterable[int],
    ) -> Tuple[List[EncryptedBlock], List[BitTrace]]:
        self._check_public_key(pk)
        p = self.params
        bits = as_vector(list(bits))
        total = len(bits)
        if total == 0:
            return [], []

        chunks = self._random_chunks(total)
        if self.workers is not None and self.workers > 1 and total > self.chunk_size:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="regev-enc") as pool:
                results = list(pool.map(lambda R: self._encrypt_chunk(pk, R), chunks))
        else:
            results = [self._encrypt_chunk(pk, R) for R in chunks]

        U = np.concatenate([u for u, _ in results], axis=0)
        V = np.concatenate([v for _, v in results], axis=0)
        V_prime = mod_q(V + bits * p.half_q, p.q)

        logger.debug("Batch-encrypted %d bits in %d chunks", total, len(results))
        blocks = [EncryptedBlock(u=U[i], v=V_prime[i]) for i in range(total)]
        return blocks, self._traces(bits, V, V_prime)

    def decrypt_blocks(self, sk: LWESecretKey, blocks: Sequence[EncryptedBlock]) -> np.ndarray:
        if not blocks:
            return np.zeros(0, dtype=np.int64)
        p = self.params
        # reduce first: lifted entries would overflow int64 in the product
        U = mod_q(np.stack([block.u for block in blocks]), p.q)
        V = np.array([block.v % p.q for block in blocks], dtype=np.int64)
        d = mod_q(V - mat_vec_mul(U, sk.s, p.q), p.q)
        return decode_bits(d, p)
