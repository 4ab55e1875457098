# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: 3-vector / 3x3 matrix primitives

Conventions:
─────────────────────────────────────────────────────
  Vectors are float64 arrays of shape (3,), treated as COLUMN vectors.
  Matrices are float64 arrays of shape (3, 3), row-major:

        matrix3([a, b, c, d, e, f, g, h, i])  ->  | a b c |
                                                  | d e f |
                                                  | g h i |

  so that ``multiply(M, v)`` computes M·v and ``multiply(A, B)`` computes A·B.

  Kernels are compiled with ``error_model="numpy"``: a singular matrix or a
  zero divisor yields inf / NaN entries instead of raising.  Shape errors are
  programming errors and raise ``ValueError`` before reaching a kernel.
"""

from typing import Sequence, Union

import numpy as np
from numba import njit

from kiln_colortypes import ArrayFloat

__all__ = [
    "vector3",
    "matrix3",
    "identity3",
    "diagonal3",
    "multiply",
    "inverse",
    "freeze",
]

MatrixLike = Union[ArrayFloat, Sequence[Sequence[float]]]
VectorLike = Union[ArrayFloat, Sequence[float]]


# ═══════════════════════════════════════════════════════════════════════════════
# Kernels
# ═══════════════════════════════════════════════════════════════════════════════

@njit(cache=True, error_model="numpy")
def _mat3_mul_kernel(a: ArrayFloat, b: ArrayFloat) -> ArrayFloat:
    """C = A·B for 3x3 operands."""
    out = np.empty((3, 3), dtype=np.float64)
    for i in range(3):
        for j in range(3):
            out[i, j] = a[i, 0] * b[0, j] + a[i, 1] * b[1, j] + a[i, 2] * b[2, j]
    return out


@njit(cache=True, error_model="numpy")
def _mat3_vec_kernel(m: ArrayFloat, v: ArrayFloat) -> ArrayFloat:
    """w = M·v for a 3x3 matrix and a column 3-vector."""
    out = np.empty(3, dtype=np.float64)
    for i in range(3):
        out[i] = m[i, 0] * v[0] + m[i, 1] * v[1] + m[i, 2] * v[2]
    return out


@njit(cache=True, error_model="numpy")
def _mat3_inverse_kernel(m: ArrayFloat) -> ArrayFloat:
    """
    Closed-form inverse via the adjugate.

    The determinant is expanded along the first row using the same
    cofactors that populate the first column of the adjugate.
    """
    a, b, c = m[0, 0], m[0, 1], m[0, 2]
    d, e, f = m[1, 0], m[1, 1], m[1, 2]
    g, h, i = m[2, 0], m[2, 1], m[2, 2]

    c00 = e * i - f * h
    c01 = f * g - d * i
    c02 = d * h - e * g

    det = a * c00 + b * c01 + c * c02
    inv_det = 1.0 / det

    out = np.empty((3, 3), dtype=np.float64)
    out[0, 0] = c00 * inv_det
    out[0, 1] = (c * h - b * i) * inv_det
    out[0, 2] = (b * f - c * e) * inv_det
    out[1, 0] = c01 * inv_det
    out[1, 1] = (a * i - c * g) * inv_det
    out[1, 2] = (c * d - a * f) * inv_det
    out[2, 0] = c02 * inv_det
    out[2, 1] = (b * g - a * h) * inv_det
    out[2, 2] = (a * e - b * d) * inv_det
    return out


# ═══════════════════════════════════════════════════════════════════════════════
# Shape guards
# ═══════════════════════════════════════════════════════════════════════════════

def _as_matrix3(m: MatrixLike) -> ArrayFloat:
    # Always a private, writable, C-contiguous copy for the kernels.
    arr = np.array(m, dtype=np.float64, order="C")
    if arr.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {arr.shape}")
    return arr


def _as_vector3(v: VectorLike) -> ArrayFloat:
    arr = np.array(v, dtype=np.float64, order="C").ravel()
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-vector, got shape {arr.shape}")
    return arr


# ═══════════════════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════════════════

def freeze(arr: ArrayFloat) -> ArrayFloat:
    """Marks *arr* read-only in place and returns it."""
    arr.flags.writeable = False
    return arr


def vector3(x: float, y: float, z: float) -> ArrayFloat:
    """Builds a float64 column 3-vector."""
    return np.array([x, y, z], dtype=np.float64)


def matrix3(values: Sequence[float]) -> ArrayFloat:
    """
    Builds a 3x3 matrix from a flat sequence.

    Args:
        values: Nine row-major entries, or three entries for a diagonal
                matrix.

    Returns:
        A float64 array of shape (3, 3).
    """
    flat = np.asarray(values, dtype=np.float64).ravel()
    if flat.shape[0] == 9:
        return flat.reshape(3, 3).copy()
    if flat.shape[0] == 3:
        return np.diag(flat)
    raise ValueError(f"Expected 9 (row-major) or 3 (diagonal) values, got {flat.shape[0]}")


def identity3() -> ArrayFloat:
    return np.eye(3, dtype=np.float64)


def diagonal3(x: float, y: float, z: float) -> ArrayFloat:
    return np.diag(np.array([x, y, z], dtype=np.float64))


def multiply(a: MatrixLike, b: Union[MatrixLike, VectorLike]) -> ArrayFloat:
    """
    Multiplies a 3x3 matrix by either a 3x3 matrix or a column 3-vector.

    Args:
        a: Left operand, shape (3, 3).
        b: Right operand, shape (3, 3) or (3,).

    Returns:
        A·b with the shape of *b*.
    """
    m = _as_matrix3(a)
    rhs = np.asarray(b, dtype=np.float64)
    if rhs.ndim == 2:
        return _mat3_mul_kernel(m, _as_matrix3(rhs))
    return _mat3_vec_kernel(m, _as_vector3(rhs))


def inverse(m: MatrixLike) -> ArrayFloat:
    """
    Inverts a 3x3 matrix.

    No singularity check is made; a singular input propagates inf / NaN.
    """
    return _mat3_inverse_kernel(_as_matrix3(m))
