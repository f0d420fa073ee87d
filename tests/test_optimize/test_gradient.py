"""Tests for finite-difference gradients and the Armijo line search."""

import numpy as np
import pytest

from pynumeric.exceptions import NumericalError
from pynumeric.optimize import backtracking_armijo, gradient


def test_gradient_of_smooth_function():
    def f(x):
        return np.sin(x[0]) + x[1] ** 3

    x = np.array([0.3, -1.2])
    np.testing.assert_allclose(gradient(f, x), [np.cos(0.3), 3 * 1.44], rtol=1e-6)


def test_gradient_rejects_nan():
    with pytest.raises(NumericalError):
        gradient(lambda x: float("nan"), np.zeros(2))


def test_line_search_accepts_full_step_on_quadratic():
    def f(x):
        return float(x @ x)

    x = np.array([1.0, 1.0])
    step = -x
    result = backtracking_armijo(f, x, f(x), step, float(2 * x @ step), 1e-8, 50)
    assert result.t == 1.0
    assert result.rejected == 0
    np.testing.assert_array_equal(result.x, [0.0, 0.0])


def test_line_search_halves_overlong_step():
    def f(x):
        return float(x @ x)

    x = np.array([1.0])
    step = np.array([-10.0])
    result = backtracking_armijo(f, x, f(x), step, float(2 * x @ step), 1e-8, 50)
    assert result.rejected > 0
    assert result.fun < f(x)


def test_line_search_rejects_bad_constant():
    with pytest.raises(ValueError):
        backtracking_armijo(lambda x: 0.0, np.zeros(1), 0.0, np.ones(1), -1.0, 1e-8, 5, c=1.5)
