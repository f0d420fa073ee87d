import numpy as np

from pynumeric.convex.kkt import is_kkt_optimal, kkt_residuals


def test_kkt_residuals_at_optimum():
    D = np.eye(2)
    d = np.array([-1.0, -1.0])
    A = np.array([[1.0], [1.0]])
    b = np.array([1.0])
    x = np.array([0.5, 0.5])
    lam = np.array([-0.5])
    residuals = kkt_residuals(D, d, A, b, x, lam, meq=1)
    assert residuals["primal_eq"] <= 1e-9
    assert residuals["dual"] <= 1e-9
    assert is_kkt_optimal(D, d, A, b, x, lam, meq=1)


def test_kkt_detects_infeasibility():
    D = np.eye(1)
    d = np.array([0.0])
    A = np.array([[1.0]])
    b = np.array([2.0])
    x = np.array([1.0])
    residuals = kkt_residuals(D, d, A, b, x)
    assert residuals["primal_ineq"] > 0.5
    assert not is_kkt_optimal(D, d, A, b, x)


def test_kkt_flags_negative_inequality_multiplier():
    D = np.eye(1)
    d = np.array([-1.0])
    A = np.array([[-1.0]])
    b = np.array([-1.0])
    x = np.array([1.0])
    # Stationarity holds with lambda = 0, so a negative multiplier only shows
    # up through the sign check.
    assert kkt_residuals(D, d, A, b, x, np.array([0.0]))["dual"] <= 1e-12
    residuals = kkt_residuals(D, d, A, b, x + 1.0, np.array([-1.0]))
    assert residuals["dual"] >= 1.0


def test_kkt_complementarity():
    D = np.eye(1)
    d = np.array([0.0])
    A = np.array([[1.0]])
    b = np.array([-1.0])
    x = np.array([0.0])
    residuals = kkt_residuals(D, d, A, b, x, np.array([0.5]))
    assert residuals["complementary"] == 0.5
    assert not is_kkt_optimal(D, d, A, b, x, np.array([0.5]))


def test_kkt_without_constraints():
    residuals = kkt_residuals(np.eye(2), np.array([1.0, 2.0]), None, None, np.array([-1.0, -2.0]))
    assert residuals == {"primal_eq": 0.0, "primal_ineq": 0.0, "dual": 0.0, "complementary": 0.0}
