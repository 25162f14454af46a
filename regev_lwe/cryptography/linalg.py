# regev_lwe/cryptography/linalg.py
"""
Regev-LWE Modular Linear Algebra

Matrix/vector operations over Z_q. Every result is the canonical
representative in [0, q), i.e. ((raw % q) + q) % q. numpy's `%` with a
positive modulus already returns that representative for int64 operands.

Shape mismatches raise PreconditionError: they are caller bugs, never a
property of user input.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from .common import as_vector, require


def mod_q(x: Any, q: int) -> Any:
    """Canonical representative(s) of x in [0, q)."""
    return np.mod(x, q)


def _matrix(A: Any) -> np.ndarray:
    A = as_vector(A)
    require(A.ndim == 2, f"expected a matrix, got shape {A.shape}")
    return A


def _vector(v: Any) -> np.ndarray:
    v = as_vector(v)
    require(v.ndim == 1, f"expected a vector, got shape {v.shape}")
    return v


def mat_vec_mul(A: Any, s: Any, q: int) -> np.ndarray:
    """(A @ s) mod q. Requires cols(A) == len(s)."""
    A, s = _matrix(A), _vector(s)
    require(A.shape[1] == s.shape[0], f"mat_vec_mul: cols(A)={A.shape[1]} != len(s)={s.shape[0]}")
    return mod_q(A @ s, q)


def mat_trans_vec_mul(A: Any, r: Any, q: int) -> np.ndarray:
    """(A.T @ r) mod q, without materializing A.T. Requires rows(A) == len(r)."""
    A, r = _matrix(A), _vector(r)
    require(A.shape[0] == r.shape[0], f"mat_trans_vec_mul: rows(A)={A.shape[0]} != len(r)={r.shape[0]}")
    return mod_q(r @ A, q)


def vec_dot(v1: Any, v2: Any, q: int) -> int:
    """(v1 · v2) mod q as a Python int."""
    v1, v2 = _vector(v1), _vector(v2)
    require(v1.shape == v2.shape, f"vec_dot: len {v1.shape[0]} != {v2.shape[0]}")
    return int(mod_q(v1 @ v2, q))


def vec_add(v1: Any, v2: Any, q: int) -> np.ndarray:
    """(v1 + v2) mod q, element-wise."""
    v1, v2 = _vector(v1), _vector(v2)
    require(v1.shape == v2.shape, f"vec_add: len {v1.shape[0]} != {v2.shape[0]}")
    return mod_q(v1 + v2, q)


# =============================================================================
# Batched forms
# =============================================================================

def mat_trans_mat_mul(A: Any, R: Any, q: int) -> np.ndarray:
    """
    Row k of the result is mat_trans_vec_mul(A, R[k]).

    R has one row per encrypted bit (shape bits×m); result is bits×n.
    """
    A, R = _matrix(A), _matrix(R)
    require(A.shape[0] == R.shape[1], f"mat_trans_mat_mul: rows(A)={A.shape[0]} != cols(R)={R.shape[1]}")
    return mod_q(R @ A, q)

