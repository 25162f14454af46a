# regev_lwe/cryptography/core.py
"""
Regev-LWE Core Components

Bitwise Regev encryption over Z_q:

  KeyGen:  s <- [-B, B]^n,  A <- Z_q^{m×n},  e <- [-B, B]^m
           pk = (A, b = A @ s + e mod q),  sk = s
  Enc(b):  r <- {0,1}^m,  u = A.T @ r,  v = b @ r + bit * floor(q/2)
  Dec:     d = v - s @ u = e @ r + bit * floor(q/2)  (mod q)
           bit = 1 iff d is within floor(q/4) of floor(q/2)

RegevLWE is the reference per-bit implementation; batch.BatchRegevLWE
produces identical blocks with vectorized arithmetic.
"""

from __future__ import annotations

import time
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .codec import decode_ciphertext, encode_ciphertext
from .common import (
    DEFAULT_PARAMS,
    ERR_BLOCK_SHAPE,
    ERR_UTF8,
    BitTrace,
    DecodeError,
    EncryptedBlock,
    EncryptionResult,
    KeyPair,
    LWEParams,
    LWEPublicKey,
    LWESecretKey,
    SerializedCiphertext,
    as_vector,
    bits_to_bytes,
    bytes_to_bits,
    logger,
    require,
)
from .entropy import RandomSource, default_source
from .linalg import mat_trans_vec_mul, mat_vec_mul, mod_q, vec_add, vec_dot


def now_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


# =============================================================================
# Threshold Decoding
# =============================================================================

def decode_bit(d: int, params: LWEParams = DEFAULT_PARAMS) -> int:
    """
    Classify a decrypted value d in [0, q) as bit 0 or 1.

    Values above q - floor(q/4) are centered to d - q first, so noise that
    wrapped below zero stays near 0. Example (q=3329): d=3328 -> -1 -> 0.
    """
    d = int(d)
    if d > params.center_threshold:
        d -= params.q
    return 1 if abs(d - params.half_q) < params.quarter_q else 0


def decode_bits(d: np.ndarray, params: LWEParams = DEFAULT_PARAMS) -> np.ndarray:
    """Vectorized decode_bit."""
    d = as_vector(d)
    d = np.where(d > params.center_threshold, d - params.q, d)
    return (np.abs(d - params.half_q) < params.quarter_q).astype(np.int64)


# =============================================================================
# Regev LWE (reference)
# =============================================================================

class RegevLWE:
    """
    Regev public-key encryption, one ciphertext block per plaintext bit.

    Stateless apart from the injected RandomSource: key pairs are returned
    to the caller and passed back into encrypt/decrypt.

    Args:
        params: System configuration (dimensions, modulus, error bound)
        rng: Randomness; defaults to the process SystemRandomSource
    """

    def __init__(
        self,
        params: Optional[LWEParams] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.params = params if params is not None else DEFAULT_PARAMS
        self.rng = rng if rng is not None else default_source()

    def key_gen(self) -> KeyPair:
        """Generate an LWE key pair; the error vector e is discarded."""
        p = self.params
        start = time.perf_counter()

        s = self.rng.symmetric_errors(p.error_bound, p.n)
        A = self.rng.uniform_ints(p.q, p.m * p.n).reshape(p.m, p.n)
        e = self.rng.symmetric_errors(p.error_bound, p.m)

        b = vec_add(mat_vec_mul(A, s, p.q), e, p.q)

        logger.debug(
            "Generated key pair: m=%d n=%d q=%d in %.1fms",
            p.m, p.n, p.q, (time.perf_counter() - start) * 1000,
        )
        return KeyPair(pk=LWEPublicKey(A=A, b=b), sk=LWESecretKey(s=s))

    def _check_public_key(self, pk: LWEPublicKey) -> None:
        p = self.params
        require(
            pk.A.shape == (p.m, p.n) and pk.b.shape == (p.m,),
            f"public key shape A={pk.A.shape} b={pk.b.shape} does not match m={p.m} n={p.n}",
        )

    def _traces(self, bits: np.ndarray, v_raw: Sequence[int], v_prime: Sequence[int]) -> List[BitTrace]:
        p = self.params
        limit = min(p.stats_limit, len(bits))
        return [
            BitTrace(
                bit_index=i,
                original_bit=int(bits[i]),
                v_raw=int(v_raw[i]),
                v_prime=int(v_prime[i]),
                encoded=int(bits[i]) * p.half_q,
            )
            for i in range(limit)
        ]

    def encrypt_bits(
        self,
        pk: LWEPublicKey,
        bits: Iterable[int],
    ) -> Tuple[List[EncryptedBlock], List[BitTrace]]:
        """
        Encrypt each bit into an (u, v) block.

        Returns:
            blocks: One EncryptedBlock per bit, in bit order
            traces: BitTrace for the first params.stats_limit bits
        """
        self._check_public_key(pk)
        p = self.params
        bits = as_vector(list(bits))

        blocks: List[EncryptedBlock] = []
        v_raw: List[int] = []
        v_prime: List[int] = []

        for bit in bits:
            r = self.rng.binary_vector(p.m)
            u = mat_trans_vec_mul(pk.A, r, p.q)
            v = vec_dot(pk.b, r, p.q)
            vp = (v + int(bit) * p.half_q) % p.q
            blocks.append(EncryptedBlock(u=u, v=vp))
            if len(v_raw) < p.stats_limit:
                v_raw.append(v)
                v_prime.append(vp)

        return blocks, self._traces(bits, v_raw, v_prime)

    def decrypt_blocks(self, sk: LWESecretKey, blocks: Sequence[EncryptedBlock]) -> np.ndarray:
        """Recover one bit per block."""
        p = self.params
        bits = np.zeros(len(blocks), dtype=np.int64)
        for i, block in enumerate(blocks):
            s_dot_u = vec_dot(sk.s, mod_q(block.u, p.q), p.q)
            bits[i] = decode_bit((block.v - s_dot_u) % p.q, p)
        return bits

    def encrypt(self, pk: LWEPublicKey, plaintext: str) -> EncryptionResult:
        """
        Encrypt a UTF-8 string.

        Empty plaintext yields an empty (but valid) ciphertext container.
        """
        bits = bytes_to_bits(plaintext.encode("utf-8"))
        blocks, traces = self.encrypt_bits(pk, bits)

        container = SerializedCiphertext(
            blocks=blocks,
            timestamp=now_ms(),
            algorithm=self.params.algorithm,
        )
        logger.debug("Encrypted %d bytes into %d blocks", len(bits) // 8, len(blocks))
        return EncryptionResult(ciphertext=encode_ciphertext(container), stats=tuple(traces))

    def decrypt(self, sk: LWESecretKey, ciphertext: str) -> str:
        """
        Decrypt a transport string.

        Raises:
            DecodeError: malformed ciphertext, block dimension mismatch, or
                the recovered bytes are not UTF-8. No partial plaintext is
                returned.
        """
        try:
            container = decode_ciphertext(ciphertext)
            n = len(sk.s)
            if any(block.u.shape != (n,) for block in container.blocks):
                raise DecodeError(ERR_BLOCK_SHAPE)

            data = bits_to_bytes(self.decrypt_blocks(sk, container.blocks))
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(ERR_UTF8) from e
        except DecodeError as e:
            logger.warning("Decryption failed: %s", e)
            raise


# =============================================================================
# Test Suite
# =============================================================================

def run_tests() -> bool:
    """Execute a quick self-check."""
    print("=" * 70)
    print("Regev-LWE Core Self-Check")
    print("=" * 70)

    results = {}

    print("\n[Test 1] Round trip (reference parameters)")
    print("-" * 40)
    lwe = RegevLWE()
    keys = lwe.key_gen()
    ok = True
    for msg in ["", "A", "Hello, LWE!", "Merhaba dünya 🔐"]:
        res = lwe.encrypt(keys.pk, msg)
        match = lwe.decrypt(keys.sk, res.ciphertext) == msg
        ok = ok and match
        print(f"  {msg!r:24s}: {'PASS' if match else 'FAIL'}")
    results["roundtrip"] = ok

    print("\n[Test 2] Centering")
    print("-" * 40)
    centering_ok = decode_bit(3328) == 0 and decode_bit(1664) == 1 and decode_bit(0) == 0
    results["centering"] = centering_ok
    print(f"  decode_bit(3328/1664/0): {'PASS' if centering_ok else 'FAIL'}")

    print("\n" + "=" * 70)
    all_pass = all(results.values())
    print(f"Result: {'ALL TESTS PASSED' if all_pass else 'SOME TESTS FAILED'}")
    print("=" * 70)

    return all_pass


if __name__ == "__main__":
    run_tests()
