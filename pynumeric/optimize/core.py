"""Core interfaces shared by the unconstrained minimizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

Array = np.ndarray
Objective = Callable[[Array], float]
Gradient = Callable[[Array], Array]
Callback = Callable[[int, Array, float, Array, Array], bool]

DEFAULT_TOL = 1e-8
DEFAULT_MAXIT = 1000

# Termination messages reported in ``OptimizeResult.message``.
MSG_CALLBACK = "Callback returned true"
MSG_GRADIENT_NONFINITE = "Gradient has Infinity or NaN"
MSG_STEP_NONFINITE = "Search direction has Infinity or NaN"
MSG_NEWTON_STEP = "Newton step smaller than tol"
MSG_LINE_SEARCH_STEP = "Line search step size smaller than tol"
MSG_MAXIT_LINE_SEARCH = "maxit reached during line search"
MSG_MAXIT = "maxit reached"

CONVERGED_MESSAGES = frozenset({MSG_NEWTON_STEP, MSG_LINE_SEARCH_STEP})


@dataclass
class OptimizeResult:
    """Result returned by :func:`pynumeric.optimize.uncmin`.

    Attributes:
        x: Final iterate.
        fun: Objective value at ``x``.
        grad: Gradient at ``x``.
        inv_hessian: Final BFGS inverse-Hessian approximation.
        nit: Iterations consumed, counting rejected line-search trials.
        message: Termination reason.
        nfev: Objective evaluations (excluding finite-difference evaluations).
        njev: Gradient evaluations.
    """

    x: Array
    fun: float
    grad: Array
    inv_hessian: Array
    nit: int
    message: str
    nfev: int = 0
    njev: int = 0
    success: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.success is None:
            self.success = self.message in CONVERGED_MESSAGES


__all__ = [
    "Array",
    "Objective",
    "Gradient",
    "Callback",
    "OptimizeResult",
    "DEFAULT_TOL",
    "DEFAULT_MAXIT",
    "MSG_CALLBACK",
    "MSG_GRADIENT_NONFINITE",
    "MSG_STEP_NONFINITE",
    "MSG_NEWTON_STEP",
    "MSG_LINE_SEARCH_STEP",
    "MSG_MAXIT_LINE_SEARCH",
    "MSG_MAXIT",
]
