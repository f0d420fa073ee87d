"""Backtracking line search used by the quasi-Newton minimizer."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .core import Array, Objective


@dataclass
class LineSearchResult:
    t: float
    x: Array
    s: Array
    fun: float
    rejected: int


def backtracking_armijo(
    f: Objective,
    x: Array,
    fx: float,
    step: Array,
    slope: float,
    tol: float,
    budget: int,
    c: float = 0.1,
) -> LineSearchResult:
    """Armijo backtracking starting from the full step.

    The trial ``x + t * step`` is accepted when
    ``f(x + t step) - f(x) < c * t * slope`` and the value is not NaN;
    otherwise ``t`` is halved. The search stops early once
    ``t * ||step||`` falls below ``tol`` or ``budget`` rejections are used.
    """
    if not (0 < c < 1):
        raise ValueError("Armijo constant c must lie in (0, 1)")
    nstep = float(np.linalg.norm(step))
    t = 1.0
    rejected = 0
    x_new = x
    s = np.zeros_like(x)
    f_new = fx
    while rejected < budget:
        if t * nstep < tol:
            break
        s = t * step
        x_new = x + s
        f_new = float(f(x_new))
        if math.isnan(f_new) or f_new - fx >= c * t * slope:
            t *= 0.5
            rejected += 1
            continue
        break
    return LineSearchResult(t=t, x=x_new, s=s, fun=f_new, rejected=rejected)


__all__ = ["LineSearchResult", "backtracking_armijo"]
