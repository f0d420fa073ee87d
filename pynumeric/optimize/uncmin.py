"""Unconstrained minimization with BFGS inverse-Hessian updates."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from ..config import get_epsilon
from ..exceptions import NumericalError
from ..logging import get_logger
from .core import (
    DEFAULT_MAXIT,
    DEFAULT_TOL,
    MSG_CALLBACK,
    MSG_GRADIENT_NONFINITE,
    MSG_LINE_SEARCH_STEP,
    MSG_MAXIT,
    MSG_MAXIT_LINE_SEARCH,
    MSG_NEWTON_STEP,
    MSG_STEP_NONFINITE,
    Array,
    Callback,
    Gradient,
    Objective,
    OptimizeResult,
)
from .gradient import gradient as numerical_gradient
from .line_search import backtracking_armijo

logger = get_logger(__name__)


def uncmin(
    f: Objective,
    x0: Array,
    tol: float = DEFAULT_TOL,
    gradient: Optional[Gradient] = None,
    maxit: int = DEFAULT_MAXIT,
    callback: Optional[Callback] = None,
    inv_hessian: Optional[Array] = None,
) -> OptimizeResult:
    """Minimize a scalar function of a vector.

    Args:
        f: Objective ``f(x) -> float``.
        x0: Starting point.
        tol: Step-size tolerance; raised to machine epsilon if smaller.
        gradient: Analytic gradient; central differences are used when omitted.
        maxit: Iteration budget shared by outer steps and rejected
            line-search trials.
        callback: ``callback(it, x, fx, gx, H)`` returning True stops the run.
        inv_hessian: Initial inverse-Hessian approximation (identity by default).

    Returns:
        :class:`OptimizeResult` whose ``message`` names the stopping reason.

    Raises:
        NumericalError: If ``f(x0)`` is NaN or the numerical gradient fails.
    """
    x = np.array(x0, dtype=float)
    n = x.size
    fx = float(f(x))
    nfev = 1
    if math.isnan(fx):
        raise NumericalError("uncmin: f(x0) is a NaN!")
    tol = max(tol, get_epsilon())
    if gradient is None:
        def gradient(point: Array) -> Array:
            return numerical_gradient(f, point)
    H = np.eye(n) if inv_hessian is None else np.array(inv_hessian, dtype=float)
    g = np.asarray(gradient(x), dtype=float)
    njev = 1
    it = 0
    message = MSG_MAXIT

    while it < maxit:
        if callback is not None and callback(it, x, fx, g, H):
            message = MSG_CALLBACK
            break
        if not np.all(np.isfinite(g)):
            message = MSG_GRADIENT_NONFINITE
            break
        step = -H @ g
        if not np.all(np.isfinite(step)):
            message = MSG_STEP_NONFINITE
            break
        nstep = float(np.linalg.norm(step))
        if nstep < tol:
            message = MSG_NEWTON_STEP
            break

        search = backtracking_armijo(f, x, fx, step, float(g @ step), tol, maxit - it)
        it += search.rejected
        nfev += search.rejected + (0 if search.t * nstep < tol else 1)
        if search.t * nstep < tol:
            message = MSG_LINE_SEARCH_STEP
            break
        if it == maxit:
            message = MSG_MAXIT_LINE_SEARCH
            break

        g_new = np.asarray(gradient(search.x), dtype=float)
        njev += 1
        s = search.s
        y = g_new - g
        ys = np.float64(y @ s)
        Hy = H @ y
        with np.errstate(divide="ignore", invalid="ignore"):
            H = (
                H
                + ((ys + y @ Hy) / (ys * ys)) * np.outer(s, s)
                - (np.outer(Hy, s) + np.outer(s, Hy)) / ys
            )
        x = search.x
        fx = search.fun
        g = g_new
        it += 1

    if message in (MSG_GRADIENT_NONFINITE, MSG_STEP_NONFINITE, MSG_MAXIT_LINE_SEARCH, MSG_MAXIT):
        logger.warning("uncmin stopped after %d iterations: %s", it, message)
    else:
        logger.debug("uncmin stopped after %d iterations: %s", it, message)
    return OptimizeResult(
        x=x, fun=fx, grad=g, inv_hessian=H, nit=it, message=message, nfev=nfev, njev=njev
    )


__all__ = ["uncmin"]
