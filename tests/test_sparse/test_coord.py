"""Tests for coordinate matrices, profile LU and grid Laplacians."""

import numpy as np

from pynumeric.sparse import (
    COOMatrix,
    cdelsq,
    cdot_mv,
    cgrid,
    coo_lu,
    coo_lu_solve,
    coo_to_ccs,
    ccs_full,
)


def test_cgrid_l_shape():
    g = cgrid(5)
    assert g.shape == (5, 5)
    assert np.all(g[0] == -1) and np.all(g[:, -1] == -1)
    assert g.max() == 6
    # The upper-right quadrant is cut out.
    assert g[1, 3] == -1
    assert g[3, 3] >= 0


def test_cgrid_square_and_predicate():
    assert cgrid(4, None).max() == 3
    g = cgrid((4, 5), lambda i, j: j == 2)
    assert g.max() == 1


def test_cdelsq_is_symmetric_with_row_sums_nonnegative():
    A = cdelsq(cgrid(6)).to_dense()
    np.testing.assert_array_equal(A, A.T)
    np.testing.assert_array_equal(np.diag(A), 4.0)
    assert np.all(A.sum(axis=1) >= 0)


def test_coo_lu_solves_laplacian(rng):
    A = cdelsq(cgrid(7))
    b = rng.standard_normal(A.shape[0])
    x = coo_lu_solve(coo_lu(A), b)
    np.testing.assert_allclose(A.to_dense() @ x, b, atol=1e-10)


def test_coo_lu_factors_multiply_back():
    dense = np.array([[4.0, 1.0, 0.0], [1.0, 4.0, 1.0], [0.0, 1.0, 4.0]])
    r, c = np.nonzero(dense)
    factors = coo_lu(COOMatrix(r, c, dense[r, c]))
    L = factors.L.to_dense() + np.eye(3)
    U = factors.U.to_dense()
    np.testing.assert_allclose(L @ U, dense, atol=1e-12)


def test_coo_lu_multiple_rhs():
    dense = np.array([[2.0, 1.0], [1.0, 3.0]])
    r, c = np.nonzero(dense)
    B = np.array([[1.0, 0.0], [0.0, 1.0]])
    X = coo_lu_solve(coo_lu(COOMatrix(r, c, dense[r, c])), B)
    np.testing.assert_allclose(X, np.linalg.inv(dense), atol=1e-12)


def test_cdot_mv_and_conversion():
    A = COOMatrix([0, 1, 1], [1, 0, 1], [2.0, 3.0, 4.0])
    np.testing.assert_allclose(cdot_mv(A, [1.0, 1.0]), [2.0, 7.0])
    np.testing.assert_array_equal(ccs_full(coo_to_ccs(A)), A.to_dense())
