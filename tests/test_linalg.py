# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import numpy as np
import pytest

from kiln_linalg import (
    diagonal3,
    freeze,
    identity3,
    inverse,
    matrix3,
    multiply,
    vector3,
)

M_TEST = matrix3([1.0, 2.0, 3.0,
                  4.0, 5.0, 6.0,
                  7.0, 8.0, 10.0])


def test_matrix3_is_row_major():
    assert M_TEST[0, 1] == 2.0
    assert M_TEST[1, 0] == 4.0
    assert M_TEST.shape == (3, 3)
    assert M_TEST.dtype == np.float64


def test_matrix3_three_values_builds_diagonal():
    np.testing.assert_array_equal(matrix3([2.0, 3.0, 4.0]), diagonal3(2.0, 3.0, 4.0))
    np.testing.assert_array_equal(matrix3([1.0, 1.0, 1.0]), identity3())


def test_matrix3_rejects_other_lengths():
    with pytest.raises(ValueError):
        matrix3([1.0, 2.0, 3.0, 4.0])


def test_multiply_matrix_vector():
    result = multiply(M_TEST, vector3(1.0, 1.0, 1.0))
    assert result.shape == (3,)
    np.testing.assert_allclose(result, [6.0, 15.0, 25.0])


def test_multiply_matrix_matrix_matches_numpy():
    other = matrix3([0.5, -1.0, 2.0, 0.0, 3.0, 1.0, -2.0, 0.25, 1.5])
    np.testing.assert_allclose(multiply(M_TEST, other), M_TEST @ other, rtol=1e-12)


def test_multiply_accepts_nested_sequences():
    result = multiply([[2.0, 0.0, 0.0], [0.0, 2.0, 0.0], [0.0, 0.0, 2.0]], [1.0, 2.0, 3.0])
    np.testing.assert_allclose(result, [2.0, 4.0, 6.0])


def test_multiply_rejects_bad_shapes():
    with pytest.raises(ValueError):
        multiply(np.zeros((2, 2)), vector3(1.0, 2.0, 3.0))
    with pytest.raises(ValueError):
        multiply(M_TEST, [1.0, 2.0])


def test_inverse_matches_numpy():
    np.testing.assert_allclose(inverse(M_TEST), np.linalg.inv(M_TEST), rtol=1e-12, atol=1e-12)


def test_inverse_roundtrip_is_identity():
    np.testing.assert_allclose(multiply(M_TEST, inverse(M_TEST)), identity3(), atol=1e-12)
    np.testing.assert_allclose(multiply(inverse(M_TEST), M_TEST), identity3(), atol=1e-12)


def test_inverse_of_diagonal():
    np.testing.assert_allclose(inverse(diagonal3(2.0, 4.0, 0.5)), diagonal3(0.5, 0.25, 2.0))


def test_singular_inverse_propagates_non_finite():
    singular = matrix3([1.0, 2.0, 3.0, 2.0, 4.0, 6.0, 1.0, 1.0, 1.0])
    result = inverse(singular)
    assert result.shape == (3, 3)
    assert not np.isfinite(result).any()


def test_inverse_does_not_touch_input():
    m = M_TEST.copy()
    inverse(m)
    np.testing.assert_array_equal(m, M_TEST)


def test_freeze_makes_read_only():
    m = freeze(identity3())
    with pytest.raises(ValueError):
        m[0, 0] = 2.0
    # Kernels copy their operands, so frozen matrices are still usable.
    np.testing.assert_allclose(inverse(m), identity3())
