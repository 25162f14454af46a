# tests/test_batch.py
"""
Regev-LWE Batch Engine Tests

Tests for: BatchRegevLWE
Categories:
  B1. Equivalence with the reference engine
  B2. Chunking and thread fan-out
  B3. Parameters
"""

import numpy as np
import pytest

from regev_lwe.cryptography.batch import BatchRegevLWE
from regev_lwe.cryptography.codec import decode_ciphertext
from regev_lwe.cryptography.common import LWEParams
from regev_lwe.cryptography.core import RegevLWE
from regev_lwe.cryptography.entropy import SeededRandomSource

TOY = LWEParams.from_preset("toy")
TEXT = "Batch encryption keeps block order: 0123456789 ✓"


# =============================================================================
# B1. Equivalence
# =============================================================================

@pytest.mark.parametrize("params", [TOY, LWEParams()])
def test_b1_1_same_seed_same_blocks(params):
    print("\n[B1.1] Reference and batch engines emit identical blocks")
    ref = RegevLWE(params=params, rng=SeededRandomSource(b"engine"))
    fast = BatchRegevLWE(params=params, rng=SeededRandomSource(b"engine"), chunk_size=7)

    keys_ref, keys_fast = ref.key_gen(), fast.key_gen()
    assert np.array_equal(keys_ref.pk.A, keys_fast.pk.A)
    assert np.array_equal(keys_ref.pk.b, keys_fast.pk.b)

    r_ref = ref.encrypt(keys_ref.pk, TEXT)
    r_fast = fast.encrypt(keys_fast.pk, TEXT)
    assert decode_ciphertext(r_ref.ciphertext).blocks == decode_ciphertext(r_fast.ciphertext).blocks
    assert r_ref.stats == r_fast.stats


def test_b1_2_decrypt_blocks_agree():
    print("\n[B1.2] Vectorized decryption == per-block decryption")
    fast = BatchRegevLWE(params=TOY)
    keys = fast.key_gen()
    blocks = decode_ciphertext(fast.encrypt(keys.pk, TEXT).ciphertext).blocks
    ref_bits = RegevLWE(params=TOY).decrypt_blocks(keys.sk, blocks)
    assert np.array_equal(fast.decrypt_blocks(keys.sk, blocks), ref_bits)


def test_b1_3_cross_engine_roundtrip():
    print("\n[B1.3] Encrypt with one engine, decrypt with the other")
    ref, fast = RegevLWE(), BatchRegevLWE()
    keys = ref.key_gen()
    assert fast.decrypt(keys.sk, ref.encrypt(keys.pk, TEXT).ciphertext) == TEXT
    assert ref.decrypt(keys.sk, fast.encrypt(keys.pk, TEXT).ciphertext) == TEXT


# =============================================================================
# B2. Chunking and Fan-out
# =============================================================================

@pytest.mark.parametrize("chunk_size", [1, 8, 13, 1000])
def test_b2_1_chunk_sizes(chunk_size):
    print(f"\n[B2.1] chunk_size={chunk_size}")
    lwe = BatchRegevLWE(params=TOY, chunk_size=chunk_size)
    keys = lwe.key_gen()
    assert lwe.decrypt(keys.sk, lwe.encrypt(keys.pk, TEXT).ciphertext) == TEXT


def test_b2_2_workers_preserve_order():
    print("\n[B2.2] Thread pool keeps block order")
    seq = BatchRegevLWE(params=TOY, rng=SeededRandomSource(b"w"), chunk_size=16)
    par = BatchRegevLWE(params=TOY, rng=SeededRandomSource(b"w"), chunk_size=16, workers=4)
    keys_seq, keys_par = seq.key_gen(), par.key_gen()
    text = TEXT * 4
    b_seq = decode_ciphertext(seq.encrypt(keys_seq.pk, text).ciphertext).blocks
    b_par = decode_ciphertext(par.encrypt(keys_par.pk, text).ciphertext).blocks
    assert b_seq == b_par
    assert par.decrypt(keys_par.sk, par.encrypt(keys_par.pk, text).ciphertext) == text


def test_b2_3_empty():
    print("\n[B2.3] Empty input")
    lwe = BatchRegevLWE(params=TOY, workers=2)
    keys = lwe.key_gen()
    blocks, traces = lwe.encrypt_bits(keys.pk, [])
    assert blocks == [] and traces == []
    assert lwe.decrypt_blocks(keys.sk, []).shape == (0,)
    assert lwe.decrypt(keys.sk, lwe.encrypt(keys.pk, "").ciphertext) == ""


# =============================================================================
# B3. Parameters
# =============================================================================

def test_b3_1_constructor_validation():
    print("\n[B3.1] chunk_size / workers validation")
    with pytest.raises(ValueError):
        BatchRegevLWE(chunk_size=0)
    with pytest.raises(ValueError):
        BatchRegevLWE(workers=0)


# =============================================================================
# Runner
# =============================================================================

def run_all_tests() -> None:
    test_b1_1_same_seed_same_blocks(TOY)
    test_b1_2_decrypt_blocks_agree()
    test_b1_3_cross_engine_roundtrip()
    for chunk_size in (1, 8, 13, 1000):
        test_b2_1_chunk_sizes(chunk_size)
    test_b2_2_workers_preserve_order()
    test_b2_3_empty()
    test_b3_1_constructor_validation()
    print("\nAll batch tests passed")


if __name__ == "__main__":
    run_all_tests()
