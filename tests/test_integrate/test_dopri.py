"""Tests for the Dormand-Prince integrator."""

import numpy as np
import pytest

from pynumeric.integrate import DopriResult, dopri
from pynumeric.integrate.dopri import MSG_MAXIT, MSG_STEP_TOO_SMALL


def test_exponential_decay():
    sol = dopri(0.0, 1.0, 1.0, lambda x, y: -y)
    assert isinstance(sol, DopriResult)
    assert sol.message == ""
    assert sol.x[0] == 0.0
    assert sol.x[-1] == 1.0
    assert float(sol.y[-1]) == pytest.approx(np.exp(-1.0), abs=1e-5)
    assert len(sol.ymid) == len(sol.x) - 1
    assert sol.iterations >= len(sol.x) - 1


def test_dense_output_between_nodes():
    sol = dopri(0.0, 2.0, 0.0, lambda x, y: np.cos(x), tol=1e-8)
    xs = np.linspace(0.0, 2.0, 13)
    np.testing.assert_allclose(sol.at(xs), np.sin(xs), atol=1e-6)
    assert float(sol.at(0.3)) == pytest.approx(np.sin(0.3), abs=1e-6)


def test_harmonic_oscillator_vector_state():
    def f(x, y):
        return np.array([y[1], -y[0]])

    sol = dopri(0.0, np.pi, [1.0, 0.0], f, tol=1e-8)
    np.testing.assert_allclose(sol.y[-1], [-1.0, 0.0], atol=1e-5)
    np.testing.assert_allclose(sol.at(np.pi / 2), [0.0, -1.0], atol=1e-5)


def test_scalar_event_stops_integration():
    sol = dopri(0.0, 1.0, 0.0, lambda x, y: 1.0, event=lambda x, y: y - 0.45)
    assert sol.events is True
    assert sol.x[-1] == pytest.approx(0.45, abs=1e-8)
    assert float(sol.y[-1]) == pytest.approx(0.45, abs=1e-8)


def test_vector_event_reports_mask():
    def f(x, y):
        return np.array([1.0, 2.0])

    def event(x, y):
        return y - 0.45

    sol = dopri(0.0, 1.0, [0.0, 0.0], f, event=event)
    np.testing.assert_array_equal(sol.events, [False, True])
    assert sol.x[-1] == pytest.approx(0.225, abs=1e-8)


def test_event_that_never_fires():
    sol = dopri(0.0, 1.0, 1.0, lambda x, y: -y, event=lambda x, y: y - 2.0)
    assert sol.events is None
    assert sol.x[-1] == 1.0


def test_falling_event_is_ignored():
    # Only negative-to-positive crossings stop the run.
    sol = dopri(0.0, 1.0, 1.0, lambda x, y: -1.0, event=lambda x, y: y - 0.5)
    assert sol.events is None
    assert sol.x[-1] == 1.0


def test_iteration_budget_sets_message():
    sol = dopri(0.0, 10.0, 1.0, lambda x, y: -y, maxit=2)
    assert sol.message == MSG_MAXIT
    assert sol.iterations == 2
    assert sol.x[-1] < 10.0


def test_unreachable_tolerance_reports_step_underflow():
    sol = dopri(1.0, 2.0, 1.0, lambda x, y: -y, tol=1e-300)
    assert sol.message == MSG_STEP_TOO_SMALL
    assert sol.x == [1.0]
