"""
Result dataclasses shared by the LP and QP solvers.

Both solvers report expected outcomes (infeasibility, unboundedness, an
exhausted iteration budget) as data rather than exceptions: ``message`` is
the human-readable reason, empty on success, and ``status`` the matching
:class:`Status` member.

References:
    - Goldfarb & Idnani, "A numerically stable dual method for solving
      strictly convex quadratic programs", Math. Programming 27 (1983)
    - Vanderbei, *Linear Programming: Foundations and Extensions*, ch. 21
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class Status(Enum):
    """Solution status for optimization routines."""

    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    MAX_ITER = "max_iter"
    NUMERICAL_ERROR = "numerical_error"


MSG_LP_INFEASIBLE = "Infeasible"
MSG_LP_UNBOUNDED = "Unbounded"
MSG_MAX_ITER = "maximum iteration count exceeded"
MSG_QP_INCONSISTENT = "constraints are inconsistent, no solution"
MSG_QP_NOT_PD = "matrix D in quadratic function is not positive definite"


@dataclass
class LPResult:
    """
    Outcome of :func:`pynumeric.convex.lp.solve_lp`.

    Attributes:
        solution: Final iterate, or ``None`` when the problem is infeasible.
        message: Empty on success, otherwise the stopping reason.
        iterations: Affine-scaling iterations over both phases.
        status: Enumeration matching ``message``.
        fun: Objective ``c^T x`` at ``solution`` (``None`` when infeasible).
    """

    solution: Optional[np.ndarray]
    message: str
    iterations: int
    status: Status
    fun: Optional[float] = None


@dataclass
class QPResult:
    """
    Outcome of :func:`pynumeric.convex.qp.solve_qp`.

    Attributes:
        solution: Minimizer ``x`` (last iterate when not optimal).
        value: Objective ``0.5 x^T D x + d^T x`` at ``solution``.
        unconstrained_solution: Minimizer without constraints.
        iterations: ``(added, dropped)`` counts of active-set changes.
        iact: 0-based indices of the constraints active at the solution.
        lagrangian: Multiplier per constraint, zero for inactive ones.
        message: Empty on success, otherwise the stopping reason.
        status: Enumeration matching ``message``.
    """

    solution: np.ndarray
    value: float
    unconstrained_solution: np.ndarray
    iterations: Tuple[int, int]
    iact: np.ndarray
    lagrangian: np.ndarray
    message: str = ""
    status: Status = field(default=Status.OPTIMAL)


__all__ = [
    "Status",
    "LPResult",
    "QPResult",
    "MSG_LP_INFEASIBLE",
    "MSG_LP_UNBOUNDED",
    "MSG_MAX_ITER",
    "MSG_QP_INCONSISTENT",
    "MSG_QP_NOT_PD",
]
