"""Tests for array construction and block helpers."""

import numpy as np
import pytest

from pynumeric.core.arrays import (
    as_matrix,
    block_matrix,
    diag,
    dim,
    get_block,
    get_diag,
    get_range,
    linspace,
    random,
    rep,
    set_block,
    tensor,
    transpose,
)
from pynumeric.exceptions import DimensionError
from pynumeric.prng import ARC4Random


def test_dim_of_nested_lists():
    assert dim([[1, 2, 3], [4, 5, 6]]) == (2, 3)
    assert dim(3.0) == ()


def test_ragged_input_is_rejected():
    with pytest.raises(DimensionError):
        as_matrix([[1, 2], [3]])


def test_as_matrix_square_check():
    with pytest.raises(DimensionError):
        as_matrix(np.ones((2, 3)), square=True)


def test_rep_and_diag():
    np.testing.assert_array_equal(rep((2, 2), 3), [[3.0, 3.0], [3.0, 3.0]])
    np.testing.assert_array_equal(diag([1, 2]), [[1.0, 0.0], [0.0, 2.0]])
    np.testing.assert_array_equal(get_diag([[1, 2], [3, 4]]), [1.0, 4.0])


def test_linspace_edge_cases():
    np.testing.assert_allclose(linspace(1, 3), [1.0, 2.0, 3.0])
    np.testing.assert_allclose(linspace(0, 1, 5), [0.0, 0.25, 0.5, 0.75, 1.0])
    np.testing.assert_array_equal(linspace(0, 1, 1), [1.0])
    assert linspace(0, 1, 0).size == 0


def test_block_access_uses_inclusive_corners():
    A = np.arange(16.0).reshape(4, 4)
    block = get_block(A, [1, 1], [2, 2])
    np.testing.assert_array_equal(block, [[5.0, 6.0], [9.0, 10.0]])

    set_block(A, [0, 0], [1, 1], np.zeros((2, 2)))
    assert np.all(A[:2, :2] == 0)
    assert A[2, 2] == 10.0


def test_get_block_out_of_range():
    with pytest.raises(DimensionError):
        get_block(np.zeros((2, 2)), [0, 0], [2, 1])


def test_get_range_selects_rows_and_columns():
    A = np.arange(9.0).reshape(3, 3)
    np.testing.assert_array_equal(get_range(A, [0, 2], [1]), [[1.0], [7.0]])


def test_block_matrix_assembles_grid():
    M = block_matrix([[np.eye(2), np.zeros((2, 1))], [np.ones((1, 2)), [[5.0]]]])
    assert M.shape == (3, 3)
    assert M[2, 2] == 5.0

    with pytest.raises(DimensionError):
        block_matrix([[np.eye(2), np.zeros((3, 1))]])


def test_tensor_and_transpose():
    np.testing.assert_array_equal(tensor([1, 2], [3, 4]), [[3.0, 4.0], [6.0, 8.0]])
    np.testing.assert_array_equal(transpose([[1, 2, 3]]), [[1.0], [2.0], [3.0]])


def test_random_uses_explicit_source(rng):
    x = random((2, 3), rng)
    assert x.shape == (2, 3)
    assert np.all((x >= 0) & (x < 1))

    a = random(4, ARC4Random("seed"))
    b = random(4, ARC4Random("seed"))
    np.testing.assert_array_equal(a, b)
