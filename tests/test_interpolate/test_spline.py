"""Tests for cubic Hermite splines."""

import numpy as np
import pytest

from pynumeric.exceptions import DimensionError
from pynumeric.interpolate import Spline, spline


def test_natural_spline_through_three_points():
    s = spline([0.0, 1.0, 2.0], [0.0, 1.0, 0.0])
    assert s.at(1.0) == pytest.approx(1.0)
    np.testing.assert_allclose(s.kl, [1.5, 0.0, -1.5], atol=1e-12)
    # Symmetric data gives a symmetric curve.
    assert s.at(0.5) == pytest.approx(s.at(1.5))


def test_spline_interpolates_knots(rng):
    x = np.sort(rng.uniform(0, 10, 8))
    y = rng.standard_normal(8)
    s = spline(x, y)
    np.testing.assert_allclose(s.at(x), y, atol=1e-12)


def test_natural_ends_have_zero_curvature():
    s = spline([0.0, 1.0, 3.0, 4.0], [1.0, 2.0, 0.0, 1.0])
    d2 = s.diff().diff()
    assert d2.at(0.0) == pytest.approx(0.0, abs=1e-10)
    assert d2.at(4.0) == pytest.approx(0.0, abs=1e-10)


def test_clamped_slopes():
    s = spline([0.0, 1.0, 2.0], [0.0, 1.0, 4.0], k1=0.0, kn=4.0)
    d = s.diff()
    assert d.at(0.0) == pytest.approx(0.0)
    assert d.at(2.0) == pytest.approx(4.0)
    # x^2 is reproduced exactly by a clamped cubic spline.
    assert s.at(1.5) == pytest.approx(2.25)


def test_periodic_spline_matches_sine():
    x = np.linspace(0, 2 * np.pi, 17)
    y = np.sin(x)
    y[-1] = y[0]
    s = spline(x, y, k1="periodic", kn="periodic")
    assert s.kl[0] == pytest.approx(s.kl[-1])
    t = np.linspace(0, 2 * np.pi, 50)
    np.testing.assert_allclose(s.at(t), np.sin(t), atol=2e-3)
    np.testing.assert_allclose(s.diff().at(t), np.cos(t), atol=2e-2)


def test_vector_valued_spline():
    x = [0.0, 1.0, 2.0]
    y = np.array([[0.0, 1.0], [1.0, 2.0], [0.0, 3.0]])
    s = spline(x, y)
    np.testing.assert_allclose(s.at(1.0), [1.0, 2.0])
    assert s.at([0.5, 1.5]).shape == (2, 2)
    # The second component is linear and stays linear.
    np.testing.assert_allclose(s.at([0.5, 1.5])[:, 1], [1.5, 2.5], atol=1e-12)


def test_roots_of_scalar_spline():
    s = spline([0.0, 1.0, 2.0], [0.0, 1.0, 0.0])
    np.testing.assert_allclose(s.roots(), [0.0, 2.0])

    c = spline(np.linspace(0, 2 * np.pi, 21), np.cos(np.linspace(0, 2 * np.pi, 21)))
    np.testing.assert_allclose(c.roots(), [np.pi / 2, 3 * np.pi / 2], atol=1e-3)


def test_roots_report_jump_at_knot():
    s = Spline([0.0, 1.0, 2.0], [1.0, -1.0, -1.0], [1.0, 1.0, -1.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0])
    np.testing.assert_allclose(s.roots(), [1.0])


def test_invalid_input():
    with pytest.raises(DimensionError):
        spline([0.0], [1.0])
    with pytest.raises(ValueError):
        spline([0.0, 0.0, 1.0], [1.0, 2.0, 3.0])
    with pytest.raises(DimensionError):
        spline([0.0, 1.0], np.zeros((2, 2))).roots()


@pytest.mark.parametrize(
    "k1, kn",
    [("periodic", None), (0.0, "periodic"), ("natural", None), ("periodic", "natural")],
)
def test_periodic_requires_both_ends(k1, kn):
    with pytest.raises(ValueError):
        spline([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 0.0, 0.0], k1=k1, kn=kn)


def test_clamped_end_is_honored_next_to_natural_end():
    s = spline([0.0, 1.0, 2.0, 3.0], [0.0, 1.0, 0.0, 0.0], k1=0.0)
    assert s.kl[0] == pytest.approx(0.0, abs=1e-12)
