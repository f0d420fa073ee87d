"""
Linear programming by the affine-scaling interior-point method.

Problems are given in inequality form

```
    minimize    c^T x
    subject to  A x <= b
                Aeq x = beq      (optional)
```

Equality constraints are removed first: the equality block is reduced to
echelon form, the pivot variables are expressed through the remaining ones,
and the reduced inequality problem is solved in the free variables.

The inequality solver runs in two phases. Phase 1 appends an artificial
variable ``t`` and minimizes it over ``A x - t <= b`` starting from the
strictly feasible point ``x = 0``, ``t = max(0, -min(b)) + 1``; it stops
as soon as ``t`` turns negative, which leaves a strictly interior ``x``.
Phase 2 runs the same iteration on the original objective from there.

Example:
    >>> import numpy as np
    >>> from pynumeric.convex.lp import solve_lp
    >>> c = np.array([-1.0, -1.0])
    >>> A = np.array([[1.0, 1.0], [-1.0, 0.0], [0.0, -1.0]])
    >>> b = np.array([4.0, 0.0, 0.0])
    >>> result = solve_lp(c, A, b)
    >>> round(result.fun, 6)
    -4.0

References:
    - Vanderbei, Meketon & Freedman, "A modification of Karmarkar's linear
      programming algorithm", Algorithmica 1 (1986)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import get_epsilon
from ..core.arrays import as_matrix, as_vector, get_range
from ..exceptions import DimensionError
from ..linalg.dense import echelonize, solve
from ..logging import get_logger
from .core import MSG_LP_INFEASIBLE, MSG_LP_UNBOUNDED, MSG_MAX_ITER, LPResult, Status

logger = get_logger(__name__)

STEP_FACTOR = 0.999

_STATUS = {
    "": Status.OPTIMAL,
    MSG_LP_INFEASIBLE: Status.INFEASIBLE,
    MSG_LP_UNBOUNDED: Status.UNBOUNDED,
    MSG_MAX_ITER: Status.MAX_ITER,
}


@dataclass
class _Iterate:
    solution: np.ndarray
    message: str
    iterations: int


def _affine_scaling(
    c: np.ndarray,
    A: np.ndarray,
    b: np.ndarray,
    x: np.ndarray,
    tol: float,
    maxit: int,
    phase2: bool,
) -> _Iterate:
    """Affine-scaling iteration from a strictly feasible ``x``.

    In phase 1 (``phase2=False``) the last coordinate is the artificial
    variable and reaching ``x[-1] < 0`` is reported as ``"Unbounded"``,
    which the caller reads as "interior point found".
    """
    m = c.size
    z = b - A @ x
    dotcc = float(c @ c)
    if dotcc == 0:
        # Zero objective: every feasible point is optimal.
        return _Iterate(x, "", 0)
    for count in range(maxit):
        scaled = A / z[:, None]
        p = scaled.sum(axis=0)
        dotcp = float(c @ p)
        dotpp = float(p @ p)
        alpha = 0.25 * abs(dotcc / dotcp) if dotcp != 0 else np.inf
        a1 = 100.0 * np.sqrt(dotcc / dotpp) if dotpp != 0 else np.inf
        if alpha > a1:
            alpha = a1
        if not np.isfinite(alpha):
            alpha = np.sqrt(dotcc)
        g = c + alpha * p
        H = scaled.T @ scaled + np.eye(m)
        d = solve(H, g / alpha, fast=True)
        Ad = A @ d
        with np.errstate(divide="ignore", invalid="ignore"):
            ratios = z / Ad
        blocking = ratios[ratios < 0]
        t = min(1.0, float(np.min(-STEP_FACTOR * blocking))) if blocking.size else 1.0
        y = x - t * d
        z = b - A @ y
        if not np.all(z > 0):
            return _Iterate(x, "", count)
        x = y
        if alpha < tol:
            return _Iterate(y, "", count)
        if phase2:
            s = float(c @ d)
            unbounded = not np.any(s * Ad < 0)
        else:
            unbounded = x[m - 1] < 0
        if unbounded:
            return _Iterate(y, MSG_LP_UNBOUNDED, count)
    return _Iterate(x, MSG_MAX_ITER, max(maxit, 0))


def _solve_inequality_lp(
    c: np.ndarray, A: np.ndarray, b: np.ndarray, tol: float, maxit: int
) -> _Iterate:
    m = c.size
    n = b.size
    c0 = np.concatenate([np.zeros(m), [1.0]])
    A0 = np.hstack([A, -np.ones((n, 1))])
    start = np.concatenate([np.zeros(m), [max(0.0, float(np.max(-b))) + 1.0]])
    phase1 = _affine_scaling(c0, A0, b, start, tol, maxit, phase2=False)
    x = phase1.solution[:m].copy()
    if not np.all(b - A @ x > 0):
        logger.debug("solve_lp: phase 1 found no interior point after %d iterations", phase1.iterations)
        return _Iterate(None, MSG_LP_INFEASIBLE, phase1.iterations)
    result = _affine_scaling(c, A, b, x, tol, maxit - phase1.iterations, phase2=True)
    result.iterations += phase1.iterations
    return result


def solve_lp(
    c,
    A,
    b,
    Aeq=None,
    beq=None,
    tol: Optional[float] = None,
    maxit: int = 1000,
) -> LPResult:
    """
    Minimize ``c^T x`` subject to ``A x <= b`` and optionally ``Aeq x = beq``.

    Args:
        c: Objective coefficients, length ``n``.
        A: Inequality matrix ``(k, n)``.
        b: Inequality right-hand side, length ``k``.
        Aeq: Optional full-row-rank equality matrix ``(p, n)``.
        beq: Equality right-hand side, length ``p``.
        tol: Stop once the scaling parameter drops below ``tol``
            (machine epsilon by default).
        maxit: Iteration budget shared by both phases.

    Returns:
        :class:`LPResult`; infeasible problems have ``solution=None``.

    Raises:
        DimensionError: If the operand shapes disagree.
    """
    c = as_vector(c, "c")
    A = as_matrix(A, "A")
    b = as_vector(b, "b")
    if A.shape != (b.size, c.size):
        raise DimensionError(f"A has shape {A.shape}, expected {(b.size, c.size)}")
    if tol is None:
        tol = get_epsilon()

    if Aeq is None:
        result = _solve_inequality_lp(c, A, b, tol, maxit)
        x = result.solution
    else:
        Aeq = as_matrix(Aeq, "Aeq")
        beq = as_vector(beq, "beq")
        if Aeq.shape != (beq.size, c.size):
            raise DimensionError(f"Aeq has shape {Aeq.shape}, expected {(beq.size, c.size)}")
        n = c.size
        echelon = echelonize(Aeq)
        P = echelon.P
        free = np.ones(n, dtype=bool)
        free[P] = False
        Q = np.flatnonzero(free)
        Aeq2 = get_range(Aeq, np.arange(Aeq.shape[0]), Q)
        A1 = get_range(A, np.arange(A.shape[0]), P)
        A2 = get_range(A, np.arange(A.shape[0]), Q)
        A3 = A1 @ echelon.I
        A4 = A2 - A3 @ Aeq2
        b4 = b - A3 @ beq
        c4 = c[Q] - c[P] @ (echelon.I @ Aeq2)
        result = _solve_inequality_lp(c4, A4, b4, tol, maxit)
        if result.solution is None:
            x = None
        else:
            x2 = result.solution
            x = np.empty(n)
            x[P] = echelon.I @ (beq - Aeq2 @ x2)
            x[Q] = x2

    status = _STATUS[result.message]
    if status is Status.OPTIMAL:
        logger.debug("solve_lp: optimal after %d iterations", result.iterations)
    else:
        logger.warning("solve_lp: %s after %d iterations", result.message, result.iterations)
    fun = None if x is None else float(c @ x)
    return LPResult(
        solution=x,
        message=result.message,
        iterations=result.iterations,
        status=status,
        fun=fun,
    )


__all__ = ["solve_lp", "STEP_FACTOR"]
