"""Tests for elementwise operators and reductions."""

import numpy as np
import pytest

from pynumeric.core import elementwise as ew
from pynumeric.core.elementwise import Op, UnaryOp
from pynumeric.exceptions import DimensionError


def test_binary_broadcasts_scalars():
    np.testing.assert_array_equal(ew.binary(Op.ADD, [1.0, 2.0], 1.0), [2.0, 3.0])
    np.testing.assert_array_equal(ew.binary(Op.MUL, 2.0, [[1.0], [2.0]]), [[2.0], [4.0]])


def test_binary_folds_extra_operands():
    np.testing.assert_array_equal(ew.binary(Op.SUB, [10.0], [1.0], [2.0], [3.0]), [4.0])


def test_binary_shape_mismatch():
    with pytest.raises(DimensionError):
        ew.binary(Op.ADD, np.ones(3), np.ones(2))


def test_comparison_and_bitwise_ops():
    np.testing.assert_array_equal(ew.binary(Op.LT, [1, 5], [2, 2]), [True, False])
    np.testing.assert_array_equal(ew.binary(Op.XOR, [5, 3], [1, 1]), [4, 2])
    assert int(ew.binary(Op.RRSHIFT, -1, 28)) == 15


def test_binary_inplace_writes_target():
    x = np.array([1.0, 2.0, 3.0])
    out = ew.binary_inplace(Op.MUL, x, 2.0)
    assert out is x
    np.testing.assert_array_equal(x, [2.0, 4.0, 6.0])

    with pytest.raises(ValueError):
        ew.binary_inplace(Op.LT, x, 1.0)


def test_unary_round_half_up():
    np.testing.assert_array_equal(ew.unary(UnaryOp.ROUND, [0.5, 1.5, -0.5]), [1.0, 2.0, 0.0])


def test_unary_inplace():
    x = np.array([0.0, 1.0])
    ew.unary_inplace(UnaryOp.EXP, x)
    np.testing.assert_allclose(x, [1.0, np.e])


def test_reductions():
    x = np.array([[3.0, -4.0], [0.0, 1.0]])
    assert ew.sum(x) == 0.0
    assert ew.norm2_squared([3.0, 4.0]) == 25.0
    assert ew.norm2([3.0, 4.0]) == pytest.approx(5.0)
    assert ew.norminf(x) == 4.0
    assert ew.norm1(x) == 8.0
    assert ew.sup(x) == 3.0
    assert ew.inf(x) == -4.0
    assert ew.sup([]) == -np.inf
    assert ew.inf([]) == np.inf


def test_same_compares_shape_and_values():
    assert ew.same([1, 2], [1, 2])
    assert not ew.same([1, 2], [[1, 2]])
    assert not ew.same([1, 2], [1, 3])
