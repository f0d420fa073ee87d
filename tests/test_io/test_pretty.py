"""Tests for compact text rendering."""

import numpy as np
import pytest

from pynumeric.core.tensor import Tensor
from pynumeric.io import pretty_print


def test_scalars():
    assert pretty_print(1.23456) == "1.235"
    assert pretty_print(3) == "3"
    assert pretty_print(0.0) == "0"
    assert pretty_print(float("nan")) == "NaN"
    assert pretty_print(float("inf")) == "Infinity"
    assert pretty_print(-float("inf")) == "-Infinity"
    assert pretty_print(1.23456e-10) == "1.235e-10"


def test_precision_argument():
    assert pretty_print(np.pi, precision=2) == "3.1"
    with pytest.raises(ValueError):
        pretty_print(1.0, precision=0)


def test_vector_is_right_aligned():
    assert pretty_print(np.array([1.0, 22.5])) == "[   1, 22.5]"


def test_matrix_one_row_per_line():
    assert pretty_print(np.array([[1.0, 2.0], [3.0, 40.0]])) == "[[ 1,  2],\n [ 3, 40]]"


def test_tensor_and_complex_arrays():
    assert pretty_print(Tensor([1.0], [2.0])) == "{re: [1], im: [2]}"
    assert pretty_print(np.array([1 + 2j])) == "{re: [1], im: [2]}"


def test_containers():
    assert pretty_print({"a": 1.5, "b": [True, None]}) == "{a: 1.5, b: [true, null]}"
    assert pretty_print(["x", 2]) == "['x', 2]"
