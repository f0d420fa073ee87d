"""Tests for compressed column storage matrices."""

import numpy as np
import pytest

from pynumeric.exceptions import DimensionError
from pynumeric.sparse import (
    CCSMatrix,
    ccs_add,
    ccs_dim,
    ccs_dot,
    ccs_dot_mv,
    ccs_full,
    ccs_gather,
    ccs_get_block,
    ccs_mul,
    ccs_scatter,
    ccs_sparse,
    ccs_sub,
)


@pytest.fixture
def dense():
    return np.array(
        [
            [4.0, 0.0, 1.0, 0.0],
            [0.0, 3.0, 0.0, 0.0],
            [2.0, 0.0, 5.0, 1.0],
            [0.0, 0.0, 0.0, 6.0],
        ]
    )


def test_sparse_full_roundtrip(dense):
    A = ccs_sparse(dense)
    assert A.nnz == 7
    assert ccs_dim(A) == (4, 4)
    np.testing.assert_array_equal(A.col_ptr, [0, 2, 3, 5, 7])
    np.testing.assert_array_equal(ccs_full(A), dense)


def test_scatter_sums_duplicates():
    A = ccs_scatter([0, 1, 0], [0, 1, 0], [1.0, 2.0, 3.0])
    assert A.shape == (2, 2)
    assert A.nnz == 2
    np.testing.assert_array_equal(ccs_full(A), [[4.0, 0.0], [0.0, 2.0]])


def test_scatter_out_of_range():
    with pytest.raises(DimensionError):
        ccs_scatter([0, 3], [0, 0], [1.0, 1.0], shape=(2, 2))


def test_gather_returns_triples(dense):
    rows, cols, vals = ccs_gather(ccs_sparse(dense))
    rebuilt = np.zeros((4, 4))
    rebuilt[rows, cols] = vals
    np.testing.assert_array_equal(rebuilt, dense)


def test_invalid_col_ptr_length():
    with pytest.raises(DimensionError):
        CCSMatrix([0, 1], [0], [1.0], (2, 2))


def test_get_block(dense):
    B = ccs_get_block(ccs_sparse(dense), rows=[0, 2], cols=[0, 2, 3])
    np.testing.assert_array_equal(ccs_full(B), dense[np.ix_([0, 2], [0, 2, 3])])


def test_products_match_dense(dense, rng):
    A = ccs_sparse(dense)
    x = rng.standard_normal(4)
    np.testing.assert_allclose(ccs_dot_mv(A, x), dense @ x)
    np.testing.assert_allclose(ccs_full(ccs_dot(A, A)), dense @ dense)


def test_elementwise_operations(dense):
    A = ccs_sparse(dense)
    B = ccs_sparse(np.eye(4))
    np.testing.assert_array_equal(ccs_full(ccs_add(A, B)), dense + np.eye(4))
    np.testing.assert_array_equal(ccs_full(ccs_sub(A, B)), dense - np.eye(4))
    np.testing.assert_array_equal(ccs_full(ccs_mul(A, B)), dense * np.eye(4))
    np.testing.assert_array_equal(ccs_full(ccs_mul(A, 2.0)), 2 * dense)


def test_shape_mismatch():
    with pytest.raises(DimensionError):
        ccs_add(ccs_sparse(np.eye(2)), ccs_sparse(np.eye(3)))
