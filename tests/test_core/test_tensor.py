"""Tests for the split real/imaginary complex tensor."""

import numpy as np
import pytest

from pynumeric.core.tensor import Tensor
from pynumeric.exceptions import DimensionError


def test_missing_imaginary_part_is_zero_filled():
    t = Tensor([1.0, 2.0])
    np.testing.assert_array_equal(t.im, [0.0, 0.0])
    assert t.is_real()


def test_mismatched_parts_raise():
    with pytest.raises(DimensionError):
        Tensor([1.0, 2.0], [1.0])


def test_arithmetic_matches_numpy_complex(rng):
    a = rng.standard_normal(4) + 1j * rng.standard_normal(4)
    b = rng.standard_normal(4) + 1j * rng.standard_normal(4)
    ta, tb = Tensor.from_complex(a), Tensor.from_complex(b)

    np.testing.assert_allclose((ta + tb).to_complex(), a + b)
    np.testing.assert_allclose((ta - tb).to_complex(), a - b)
    np.testing.assert_allclose((ta * tb).to_complex(), a * b)
    np.testing.assert_allclose((ta / tb).to_complex(), a / b)
    np.testing.assert_allclose(ta.exp().to_complex(), np.exp(a))
    np.testing.assert_allclose(ta.log().to_complex(), np.log(a))


def test_scalar_operands_on_either_side():
    t = Tensor([1.0], [1.0])
    np.testing.assert_allclose((2 * t).to_complex(), [2 + 2j])
    np.testing.assert_allclose((1 - t).to_complex(), [-1j])
    np.testing.assert_allclose((1 / t).to_complex(), [0.5 - 0.5j])


def test_dot_and_inverse(rng):
    A = rng.standard_normal((3, 3)) + 1j * rng.standard_normal((3, 3)) + 3 * np.eye(3)
    t = Tensor.from_complex(A)
    np.testing.assert_allclose(t.inv().to_complex(), np.linalg.inv(A), atol=1e-12)
    np.testing.assert_allclose(t.dot(t.inv()).to_complex(), np.eye(3), atol=1e-12)


def test_transjugate():
    t = Tensor([[1.0, 2.0]], [[3.0, 4.0]])
    np.testing.assert_array_equal(t.transjugate().to_complex(), [[1 - 3j], [2 - 4j]])


def test_set_methods_mutate_and_return_self():
    t = Tensor.rep((2, 2))
    assert t.set([0, 1], 1 + 2j) is t
    assert t.to_complex()[0, 1] == 1 + 2j

    t.set_row(1, [3.0, 4.0])
    np.testing.assert_array_equal(t.get_row(1).re, [3.0, 4.0])

    block = t.get_block([0, 0], [1, 0])
    np.testing.assert_array_equal(block.re, [[0.0], [3.0]])


def test_diag_roundtrip():
    v = Tensor([1.0, 2.0], [0.5, 0.0])
    d = v.diag()
    assert d.shape == (2, 2)
    np.testing.assert_array_equal(d.get_diag().im, [0.5, 0.0])

    with pytest.raises(DimensionError):
        d.diag()


def test_fft_along_last_axis():
    x = np.arange(6.0).reshape(2, 3)
    out = Tensor(x).fft()
    np.testing.assert_allclose(out.to_complex(), np.fft.fft(x, axis=-1), atol=1e-12)
    back = out.ifft()
    np.testing.assert_allclose(back.re, x, atol=1e-12)
    np.testing.assert_allclose(back.im, 0.0, atol=1e-12)
