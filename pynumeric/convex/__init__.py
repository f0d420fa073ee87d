"""
Linear and quadratic programming.

``solve_lp`` is an affine-scaling interior-point method for inequality-form
LPs (with optional equalities eliminated up front); ``solve_qp`` is the
Goldfarb-Idnani dual active-set method for strictly convex QPs. Both
report infeasibility and similar outcomes through their result objects.
"""

from . import core, kkt, lp, qp
from .core import LPResult, QPResult, Status
from .kkt import is_kkt_optimal, kkt_residuals
from .lp import solve_lp
from .qp import solve_qp

__all__ = [
    "core",
    "kkt",
    "lp",
    "qp",
    # Core types
    "Status",
    "LPResult",
    "QPResult",
    # Algorithms
    "solve_lp",
    "solve_qp",
    "kkt_residuals",
    "is_kkt_optimal",
]
