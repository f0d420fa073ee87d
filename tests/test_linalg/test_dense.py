"""Tests for dense products, inverse, determinant and LU."""

import numpy as np
import pytest

from pynumeric.exceptions import DimensionError
from pynumeric.linalg import det, dot, echelonize, inv, lu, lu_solve, solve


def test_dot_shapes():
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    assert dot([1.0, 2.0], [3.0, 4.0]) == 11.0
    np.testing.assert_array_equal(dot(A, [1.0, 1.0]), [3.0, 7.0])
    np.testing.assert_array_equal(dot([1.0, 1.0], A), [4.0, 6.0])
    np.testing.assert_array_equal(dot(2.0, A), 2 * A)

    with pytest.raises(DimensionError):
        dot(A, [1.0, 2.0, 3.0])


def test_inverse_of_inverse(rng):
    A = rng.standard_normal((5, 5)) + 5 * np.eye(5)
    np.testing.assert_allclose(inv(inv(A)), A, atol=1e-10)
    np.testing.assert_allclose(A @ inv(A), np.eye(5), atol=1e-10)


def test_inv_requires_square():
    with pytest.raises(DimensionError):
        inv(np.ones((2, 3)))


def test_det_matches_numpy(rng):
    A = rng.standard_normal((4, 4))
    assert det(A) == pytest.approx(np.linalg.det(A))


def test_det_sign_flips_on_row_swap():
    A = np.array([[1.0, 2.0, 0.0], [3.0, 1.0, 1.0], [0.0, 2.0, 5.0]])
    swapped = A[[1, 0, 2]]
    assert det(swapped) == pytest.approx(-det(A))


def test_det_of_singular_matrix_is_zero():
    A = np.array([[1.0, 2.0, 3.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0]]).T
    assert det(A) == 0.0


def test_lu_reconstructs_permuted_matrix(rng):
    A = rng.standard_normal((4, 4))
    factors = lu(A)
    L = np.tril(factors.lu, -1) + np.eye(4)
    U = np.triu(factors.lu)
    PA = A.copy()
    for k, p in enumerate(factors.pivots):
        PA[[k, p]] = PA[[p, k]]
    np.testing.assert_allclose(L @ U, PA, atol=1e-12)


def test_lu_solve_vector_and_matrix_rhs(rng):
    A = rng.standard_normal((4, 4)) + 4 * np.eye(4)
    b = rng.standard_normal(4)
    B = rng.standard_normal((4, 2))
    factors = lu(A)
    np.testing.assert_allclose(A @ lu_solve(factors, b), b, atol=1e-12)
    np.testing.assert_allclose(A @ lu_solve(factors, B), B, atol=1e-12)


def test_lu_in_place_overwrites_input():
    A = np.array([[0.0, 1.0], [2.0, 3.0]])
    factors = lu(A, in_place=True)
    assert factors.lu is A
    np.testing.assert_array_equal(factors.pivots, [1, 1])

    with pytest.raises(TypeError):
        lu([[1.0, 0.0], [0.0, 1.0]], in_place=True)


def test_solve_singular_propagates_non_finite():
    x = solve(np.zeros((2, 2)), np.ones(2))
    assert not np.all(np.isfinite(x))


def test_echelonize_identity_on_pivots():
    A = np.array([[1.0, 2.0, 0.0], [0.0, 1.0, 4.0]])
    ech = echelonize(A)
    np.testing.assert_allclose(ech.A[:, ech.P], np.eye(2), atol=1e-12)
    np.testing.assert_allclose(ech.I @ A, ech.A, atol=1e-12)
    np.testing.assert_allclose(ech.I, np.linalg.inv(A[:, ech.P]), atol=1e-12)
