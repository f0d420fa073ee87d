"""
Karush-Kuhn-Tucker diagnostics for quadratic programs in the
``A^T x >= b`` convention used by :func:`pynumeric.convex.qp.solve_qp`.
"""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np


def _symmetrize(matrix: np.ndarray) -> np.ndarray:
    return 0.5 * (matrix + matrix.T)


def kkt_residuals(
    Dmat: Optional[np.ndarray],
    dvec: Optional[np.ndarray],
    Amat: Optional[np.ndarray],
    bvec: Optional[np.ndarray],
    x: np.ndarray,
    lagrangian: Optional[np.ndarray] = None,
    meq: int = 0,
) -> Dict[str, float]:
    """
    Compute infinity norms of the KKT residuals at ``(x, lagrangian)``.

    Returns a dict with keys ``primal_eq`` (equality violation),
    ``primal_ineq`` (inequality violation), ``dual`` (stationarity
    ``D x + d - A lambda`` plus negative inequality multipliers) and
    ``complementary`` (``lambda_i * slack_i`` over inequalities).
    """

    x = np.asarray(x, dtype=float).reshape(-1)
    n = x.shape[0]
    hess = np.zeros((n, n)) if Dmat is None else _symmetrize(np.asarray(Dmat, dtype=float))
    lin = np.zeros(n) if dvec is None else np.asarray(dvec, dtype=float).reshape(-1)
    stationarity = hess @ x + lin

    primal_eq = 0.0
    primal_ineq = 0.0
    complementary = 0.0
    sign_violation = 0.0
    if Amat is not None:
        normals = np.asarray(Amat, dtype=float).reshape(n, -1)
        q = normals.shape[1]
        rhs = np.zeros(q) if bvec is None else np.asarray(bvec, dtype=float).reshape(-1)
        lam = np.zeros(q) if lagrangian is None else np.asarray(lagrangian, dtype=float).reshape(-1)
        slack = normals.T @ x - rhs
        stationarity -= normals @ lam
        if meq:
            primal_eq = float(np.linalg.norm(slack[:meq], ord=np.inf))
        if q > meq:
            primal_ineq = float(np.linalg.norm(np.minimum(slack[meq:], 0.0), ord=np.inf))
            complementary = float(np.linalg.norm(slack[meq:] * lam[meq:], ord=np.inf))
            sign_violation = float(np.linalg.norm(np.minimum(lam[meq:], 0.0), ord=np.inf))

    dual_residual = max(float(np.linalg.norm(stationarity, ord=np.inf)), sign_violation)
    return {
        "primal_eq": primal_eq,
        "primal_ineq": primal_ineq,
        "dual": dual_residual,
        "complementary": complementary,
    }


def is_kkt_optimal(
    Dmat: Optional[np.ndarray],
    dvec: Optional[np.ndarray],
    Amat: Optional[np.ndarray],
    bvec: Optional[np.ndarray],
    x: np.ndarray,
    lagrangian: Optional[np.ndarray] = None,
    meq: int = 0,
    tol: float = 1e-6,
) -> bool:
    """
    Return True if all KKT residuals are below ``tol``.
    """

    residuals = kkt_residuals(Dmat, dvec, Amat, bvec, x, lagrangian, meq)
    return all(value <= tol for value in residuals.values())


__all__ = ["kkt_residuals", "is_kkt_optimal"]
