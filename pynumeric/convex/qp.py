"""
Strictly convex quadratic programming by the Goldfarb-Idnani dual method.

Solves

```
    minimize    0.5 x^T D x + d^T x
    subject to  A^T x >= b
```

where the columns of ``A`` are the constraint normals and the first ``meq``
constraints hold with equality. ``D`` must be positive definite.

The method starts from the unconstrained minimizer and adds violated
constraints one at a time, dropping constraints whose multipliers would
turn negative, so every iterate is dual feasible. The working factorization
keeps ``J = L^{-T} Q`` and the upper triangle ``R`` with ``J^T N = [R; 0]``
for the matrix ``N`` of active normals; both are updated with Givens
rotations when a constraint enters or leaves the active set.

References:
    - Goldfarb & Idnani, "A numerically stable dual method for solving
      strictly convex quadratic programs", Math. Programming 27 (1983)
    - Powell, "On the quadratic programming algorithm of Goldfarb and
      Idnani", Math. Programming Study 25 (1985)
"""

from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from ..config import get_epsilon
from ..core.arrays import as_matrix, as_vector
from ..exceptions import DimensionError
from ..logging import get_logger
from .core import MSG_MAX_ITER, MSG_QP_INCONSISTENT, MSG_QP_NOT_PD, QPResult, Status

logger = get_logger(__name__)


def _givens(a: float, b: float) -> Tuple[float, float, float]:
    """Rotation ``(c, s)`` mapping ``(a, b)`` onto ``(h, 0)``."""
    h = math.hypot(a, b)
    if h == 0.0:
        return 1.0, 0.0, 0.0
    return a / h, b / h, h


def _rotate_columns(J: np.ndarray, i: int, j: int, c: float, s: float) -> None:
    ci = J[:, i].copy()
    cj = J[:, j].copy()
    J[:, i] = c * ci + s * cj
    J[:, j] = -s * ci + c * cj


class _ActiveSet:
    """Active constraints with the ``J``/``R`` factorization kept in step."""

    def __init__(self, J: np.ndarray) -> None:
        n = J.shape[0]
        self.J = J
        self.R = np.zeros((n, n))
        self.iact: List[int] = []
        self.u: List[float] = []

    @property
    def size(self) -> int:
        return len(self.iact)

    def directions(self, normal: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Primal step ``z``, dual step ``r`` and ``d = J^T normal``."""
        k = self.size
        d = self.J.T @ normal
        z = self.J[:, k:] @ d[k:]
        if k:
            r = _back_substitute(self.R[:k, :k], d[:k])
        else:
            r = np.zeros(0)
        return z, r, d

    def add(self, index: int, multiplier: float, d: np.ndarray) -> None:
        k = self.size
        n = self.J.shape[0]
        d = d.copy()
        for j in range(n - 1, k, -1):
            c, s, h = _givens(d[j - 1], d[j])
            d[j - 1] = h
            d[j] = 0.0
            _rotate_columns(self.J, j - 1, j, c, s)
        self.R[: k + 1, k] = d[: k + 1]
        self.iact.append(index)
        self.u.append(multiplier)

    def drop(self, position: int) -> None:
        k = self.size
        self.R[:, position:k - 1] = self.R[:, position + 1:k].copy()
        self.R[:, k - 1] = 0.0
        for j in range(position, k - 1):
            c, s, h = _givens(self.R[j, j], self.R[j + 1, j])
            rj = self.R[j, j:k - 1].copy()
            rj1 = self.R[j + 1, j:k - 1].copy()
            self.R[j, j:k - 1] = c * rj + s * rj1
            self.R[j + 1, j:k - 1] = -s * rj + c * rj1
            self.R[j, j] = h
            self.R[j + 1, j] = 0.0
            _rotate_columns(self.J, j, j + 1, c, s)
        self.R[k - 1, :] = 0.0
        del self.iact[position]
        del self.u[position]


def _back_substitute(R: np.ndarray, y: np.ndarray) -> np.ndarray:
    k = R.shape[0]
    x = np.zeros(k)
    for i in range(k - 1, -1, -1):
        x[i] = (y[i] - R[i, i + 1:] @ x[i + 1:]) / R[i, i]
    return x


def solve_qp(
    Dmat,
    dvec,
    Amat=None,
    bvec=None,
    meq: int = 0,
    factorized: bool = False,
    maxiter: Optional[int] = None,
) -> QPResult:
    """
    Minimize ``0.5 x^T D x + d^T x`` subject to ``A^T x >= b``.

    Args:
        Dmat: Symmetric positive definite ``(n, n)`` matrix ``D``. With
            ``factorized=True`` it holds ``R^{-1}`` for the upper-triangular
            Cholesky factor ``D = R^T R`` instead.
        dvec: Linear term ``d`` of length ``n``.
        Amat: Constraint normals as columns, shape ``(n, q)``; ``None`` for
            an unconstrained problem.
        bvec: Right-hand sides, length ``q``.
        meq: Number of leading constraints treated as equalities.
        factorized: Whether ``Dmat`` is already the inverse Cholesky factor.
        maxiter: Cap on active-set changes (``50 * (n + q)`` by default).

    Returns:
        :class:`QPResult`. Inconsistent constraints and a non positive
        definite ``D`` are reported through ``message`` and ``status``.

    Raises:
        DimensionError: If the operand shapes disagree.
        ValueError: If ``meq`` is outside ``[0, q]``.
    """
    D = as_matrix(Dmat, "Dmat", square=True)
    a = as_vector(dvec, "dvec")
    n = D.shape[0]
    if a.size != n:
        raise DimensionError(f"dvec has length {a.size}, expected {n}")
    if Amat is None:
        C = np.zeros((n, 0))
        b = np.zeros(0)
    else:
        C = as_matrix(Amat, "Amat").copy()
        b = as_vector(bvec, "bvec").copy()
        if C.shape[0] != n or C.shape[1] != b.size:
            raise DimensionError(f"Amat has shape {C.shape}, expected ({n}, {b.size})")
    q = C.shape[1]
    if not 0 <= meq <= q:
        raise ValueError(f"meq must lie in [0, {q}], got {meq}")
    if maxiter is None:
        maxiter = 50 * (n + q)

    if factorized:
        J0 = D.copy()
    else:
        try:
            L = np.linalg.cholesky(D)
        except np.linalg.LinAlgError:
            logger.warning("solve_qp: %s", MSG_QP_NOT_PD)
            nan = np.full(n, np.nan)
            return QPResult(
                solution=nan,
                value=math.nan,
                unconstrained_solution=nan.copy(),
                iterations=(0, 0),
                iact=np.zeros(0, dtype=int),
                lagrangian=np.zeros(q),
                message=MSG_QP_NOT_PD,
                status=Status.NUMERICAL_ERROR,
            )
        J0 = np.linalg.inv(L).T

    x = -(J0 @ (J0.T @ a))
    unconstrained = x.copy()
    value = 0.5 * float(a @ x)

    eps = get_epsilon()
    norms = np.linalg.norm(C, axis=0)
    signs = np.ones(q)
    active = _ActiveSet(J0.copy())
    added = dropped = 0
    message = ""
    status = Status.OPTIMAL

    while True:
        # Most violated inactive constraint, scaled by its normal; equalities
        # count as violated on either side.
        candidate = -1
        worst = 0.0
        in_set = set(active.iact)
        slack = C.T @ x - b
        xnorm = float(np.max(np.abs(x))) if n else 0.0
        for i in range(q):
            if i in in_set:
                continue
            s = slack[i]
            if abs(s) <= 100 * eps * max(1.0, abs(b[i]), norms[i] * xnorm):
                continue
            if i < meq:
                violation = -abs(s) / (norms[i] or 1.0)
            else:
                violation = s / (norms[i] or 1.0)
            if violation < worst:
                worst = violation
                candidate = i
        if candidate < 0:
            break
        if added + dropped >= maxiter:
            message = MSG_MAX_ITER
            status = Status.MAX_ITER
            break

        p = candidate
        if p < meq and slack[p] > 0:
            C[:, p] = -C[:, p]
            b[p] = -b[p]
            signs[p] = -signs[p]
        normal = C[:, p]
        u_new = 0.0

        while True:
            s_p = float(normal @ x - b[p])
            z, r, d = active.directions(normal)
            k = active.size

            t1 = math.inf
            drop_at = -1
            for j in range(k):
                if active.iact[j] >= meq and r[j] > 0:
                    ratio = active.u[j] / r[j]
                    if ratio < t1:
                        t1 = ratio
                        drop_at = j

            zn = float(z @ normal)
            if zn <= 100 * eps * float(d @ d):
                t2 = math.inf
            else:
                t2 = max(-s_p / zn, 0.0)

            if math.isinf(t1) and math.isinf(t2):
                message = MSG_QP_INCONSISTENT
                status = Status.INFEASIBLE
                break

            if math.isinf(t2):
                for j in range(k):
                    active.u[j] -= t1 * r[j]
                u_new += t1
                active.drop(drop_at)
                dropped += 1
                if added + dropped >= maxiter:
                    message = MSG_MAX_ITER
                    status = Status.MAX_ITER
                    break
                continue

            t = min(t1, t2)
            x = x + t * z
            value += t * zn * (0.5 * t + u_new)
            for j in range(k):
                active.u[j] -= t * r[j]
            u_new += t

            if t == t2:
                active.add(p, u_new, d)
                added += 1
                break
            active.drop(drop_at)
            dropped += 1
            if added + dropped >= maxiter:
                message = MSG_MAX_ITER
                status = Status.MAX_ITER
                break

        if status is not Status.OPTIMAL:
            break

    lagrangian = np.zeros(q)
    for index, mult in zip(active.iact, active.u):
        lagrangian[index] = signs[index] * mult
    iact = np.asarray(active.iact, dtype=int)

    if status is Status.OPTIMAL:
        logger.debug(
            "solve_qp: optimal with %d active constraints (%d added, %d dropped)",
            iact.size, added, dropped,
        )
    else:
        logger.warning("solve_qp: %s (%d added, %d dropped)", message, added, dropped)
    return QPResult(
        solution=x,
        value=value,
        unconstrained_solution=unconstrained,
        iterations=(added, dropped),
        iact=iact,
        lagrangian=lagrangian,
        message=message,
        status=status,
    )


__all__ = ["solve_qp"]
