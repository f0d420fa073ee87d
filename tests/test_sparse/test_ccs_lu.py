"""Tests for sparse triangular solves and sparse LU."""

import numpy as np
import pytest

from pynumeric.exceptions import SparseStructureError
from pynumeric.sparse import (
    DFS,
    ccs_full,
    ccs_lup,
    ccs_lup0,
    ccs_lup1,
    ccs_lup_solve,
    ccs_sparse,
    ccs_tsolve,
)


def _sparse_test_matrix(rng, n=8):
    A = rng.standard_normal((n, n))
    A[rng.random((n, n)) < 0.6] = 0.0
    return A + np.diag(rng.uniform(0.5, 1.5, n))


def test_dfs_topological_order():
    edges = {0: [1, 2], 1: [3], 2: [3], 3: []}
    dfs = DFS(4)
    order = dfs.reach([0], lambda k: np.array(edges[k]))
    assert order[0] == 0
    assert order.index(1) < order.index(3)
    assert order.index(2) < order.index(3)
    assert not dfs.visited.any()


def test_dfs_rejects_undefined_nodes():
    dfs = DFS(2)
    with pytest.raises(SparseStructureError):
        dfs.reach([0], lambda k: np.array([5]))


def test_tsolve_lower_triangular():
    L = np.array([[2.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 3.0, 4.0]])
    b = np.array([2.0, 0.0, 0.0])
    x, order = ccs_tsolve(ccs_sparse(L), b)
    np.testing.assert_allclose(L @ x, b)
    assert order == [0, 1, 2]


def test_tsolve_touches_only_reachable_entries():
    L = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 2.0, 1.0]])
    x, order = ccs_tsolve(ccs_sparse(L), np.array([0.0, 1.0, 0.0]))
    assert sorted(order) == [1, 2]
    np.testing.assert_allclose(x, [0.0, 1.0, -2.0])


@pytest.mark.parametrize("factor", [ccs_lup0, ccs_lup1])
def test_lup_factors_permuted_matrix(rng, factor):
    dense = _sparse_test_matrix(rng)
    factors = factor(ccs_sparse(dense))
    L = ccs_full(factors.L)
    U = ccs_full(factors.U)
    np.testing.assert_allclose(np.diag(L), 1.0)
    np.testing.assert_allclose(np.triu(L, 1), 0.0)
    np.testing.assert_allclose(np.tril(U, -1), 0.0)
    np.testing.assert_allclose(L @ U, dense[factors.P], atol=1e-10)
    np.testing.assert_array_equal(factors.Pinv[factors.P], np.arange(dense.shape[0]))


def test_lup_strategies_agree(rng):
    dense = _sparse_test_matrix(rng)
    A = ccs_sparse(dense)
    f0 = ccs_lup(A, strategy="lup0")
    f1 = ccs_lup(A, strategy="lup1")
    np.testing.assert_array_equal(f0.P, f1.P)
    np.testing.assert_allclose(ccs_full(f0.L), ccs_full(f1.L), atol=1e-12)
    np.testing.assert_allclose(ccs_full(f0.U), ccs_full(f1.U), atol=1e-12)

    with pytest.raises(ValueError):
        ccs_lup(A, strategy="lup2")


def test_lup_solve_dense_rhs(rng):
    dense = _sparse_test_matrix(rng)
    b = rng.standard_normal(dense.shape[0])
    x = ccs_lup_solve(ccs_lup0(ccs_sparse(dense)), b)
    np.testing.assert_allclose(dense @ x, b, atol=1e-10)


def test_lup_solve_sparse_rhs(rng):
    dense = _sparse_test_matrix(rng)
    n = dense.shape[0]
    b = np.zeros((n, 1))
    b[2, 0] = 1.0
    x = ccs_lup_solve(ccs_lup1(ccs_sparse(dense)), ccs_sparse(b))
    np.testing.assert_allclose(dense @ ccs_full(x)[:, 0], b[:, 0], atol=1e-10)


def test_permutation_required():
    dense = np.array([[0.0, 1.0], [1.0, 0.0]])
    factors = ccs_lup0(ccs_sparse(dense))
    np.testing.assert_array_equal(factors.P, [1, 0])
    np.testing.assert_allclose(ccs_lup_solve(factors, [2.0, 3.0]), [3.0, 2.0])


@pytest.mark.parametrize("strategy", ["lup0", "lup1"])
def test_relaxed_threshold_keeps_diagonal_pivot(strategy):
    dense = np.array([[0.5, 1.0, 0.0], [1.0, 4.0, 1.0], [0.0, 1.0, 3.0]])
    A = ccs_sparse(dense)
    strict = ccs_lup(A, strategy=strategy)
    assert strict.P[0] == 1

    relaxed = ccs_lup(A, threshold=0.4, strategy=strategy)
    np.testing.assert_array_equal(relaxed.P, [0, 1, 2])
    L, U = ccs_full(relaxed.L), ccs_full(relaxed.U)
    np.testing.assert_allclose(L @ U, dense, atol=1e-12)
    expected = np.array([1.0, 2.0, 3.0])
    np.testing.assert_allclose(ccs_lup_solve(relaxed, dense @ expected), expected, atol=1e-12)
