"""Dormand-Prince 4(5) adaptive Runge-Kutta integrator with dense output.

Each step evaluates seven stages (the last doubles as the first stage of
the next step), forms the fifth-order solution and a fourth-order error
estimate, and also a fifth-order value at the step midpoint. The stored
nodes, slopes and midpoints give a quartic interpolant on every accepted
step, used both by :meth:`DopriResult.at` and by event location.

References:
    - Dormand & Prince, "A family of embedded Runge-Kutta formulae",
      J. Comp. Appl. Math. 6 (1980)
    - Hairer, Norsett & Wanner, *Solving Ordinary Differential Equations I*
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import numpy as np

from ..logging import get_logger

logger = get_logger(__name__)

State = Union[float, np.ndarray]
RHS = Callable[[float, np.ndarray], State]
Event = Callable[[float, np.ndarray], State]

A2 = 1 / 5
A3 = (3 / 40, 9 / 40)
A4 = (44 / 45, -56 / 15, 32 / 9)
A5 = (19372 / 6561, -25360 / 2187, 64448 / 6561, -212 / 729)
A6 = (9017 / 3168, -355 / 33, 46732 / 5247, 49 / 176, -5103 / 18656)
B = (35 / 384, 0.0, 500 / 1113, 125 / 192, -2187 / 6784, 11 / 84)
# Weights of the fifth-order solution at the step midpoint.
BMID = (
    0.5 * 6025192743 / 30085553152,
    0.0,
    0.5 * 51252292925 / 65400821598,
    0.5 * -2691868925 / 45128329728,
    0.5 * 187940372067 / 1594534317056,
    0.5 * -1776094331 / 19743644256,
    0.5 * 11237099 / 235043384,
)
C = (1 / 5, 3 / 10, 4 / 5, 8 / 9, 1.0, 1.0)
E = (-71 / 57600, 0.0, 71 / 16695, -71 / 1920, 17253 / 339200, -22 / 525, 1 / 40)

MSG_STEP_TOO_SMALL = "Step size became too small"
MSG_MAXIT = "maxit reached"


@dataclass
class DopriResult:
    """Accepted steps of a :func:`dopri` integration.

    Attributes:
        x: Accepted abscissae.
        y: Solution at each abscissa.
        f: Right-hand side ``f(x, y)`` at each abscissa.
        ymid: Solution at the midpoint of each accepted step.
        iterations: Steps attempted, including rejected ones.
        events: Boolean mask of event components that fired, or None.
        message: Empty on normal completion, otherwise the stopping reason.
    """

    x: List[float]
    y: List[np.ndarray]
    f: List[np.ndarray]
    ymid: List[np.ndarray]
    iterations: int = -1
    events: Optional[Union[bool, np.ndarray]] = None
    message: str = ""

    def _at(self, xi: float, j: int) -> np.ndarray:
        x0, x1 = self.x[j], self.x[j + 1]
        y0, y1 = self.y[j], self.y[j + 1]
        h = x1 - x0
        xh = x0 + 0.5 * h
        yh = self.ymid[j]
        p = self.f[j] - y0 * (1 / (x0 - xh) + 2 / (x0 - x1))
        q = self.f[j + 1] - y1 * (1 / (x1 - xh) + 2 / (x1 - x0))
        w0 = (xi - x1) ** 2 * (xi - xh) / (x0 - x1) ** 2 / (x0 - xh)
        w1 = (xi - x0) ** 2 * (xi - x1) ** 2 / (x0 - xh) ** 2 / (x1 - xh) ** 2
        w2 = (xi - x0) ** 2 * (xi - xh) / (x1 - x0) ** 2 / (x1 - xh)
        w3 = (xi - x0) * (xi - x1) ** 2 * (xi - xh) / (x0 - x1) ** 2 / (x0 - xh)
        w4 = (xi - x1) * (xi - x0) ** 2 * (xi - xh) / (x0 - x1) ** 2 / (x1 - xh)
        return y0 * w0 + yh * w1 + y1 * w2 + p * w3 + q * w4

    def at(self, x):
        """Dense-output value at ``x`` (scalar or sequence of abscissae)."""
        if np.ndim(x) > 0:
            return np.asarray([self.at(float(v)) for v in np.asarray(x).reshape(-1)])
        xs = self.x
        i, j = 0, len(xs) - 1
        if j == 0:
            return self.y[0]
        while j - i > 1:
            k = (i + j) // 2
            if xs[k] <= x:
                i = k
            else:
                j = k
        return self._at(float(x), i)


def _crossed(e0: State, e1: State) -> Union[bool, np.ndarray]:
    return np.logical_and(np.asarray(e0) < 0, np.asarray(e1) > 0)


def dopri(
    x0: float,
    x1: float,
    y0: State,
    f: RHS,
    tol: float = 1e-6,
    maxit: int = 1000,
    event: Optional[Event] = None,
) -> DopriResult:
    """Integrate ``dy/dx = f(x, y)`` from ``x0`` to ``x1``.

    Args:
        x0: Start of the interval.
        x1: End of the interval (``x1 > x0``).
        y0: Initial value, scalar or vector.
        f: Right-hand side.
        tol: Bound on the max-norm of the local error estimate.
        maxit: Maximum number of attempted steps.
        event: Optional ``event(x, y)``; integration stops where any
            component crosses from negative to positive.

    Returns:
        :class:`DopriResult`. If an event fires, the last node is the located
        event point and ``events`` marks the components that crossed. A step
        size that underflows sets ``message`` instead of raising.
    """
    y0 = np.asarray(y0, dtype=float)
    ret = DopriResult(x=[float(x0)], y=[y0], f=[np.asarray(f(x0, y0), dtype=float)], ymid=[])
    h = (x1 - x0) / 10
    it = 0
    i = 0
    e0 = event(x0, y0) if event is not None else None

    while x0 < x1 and it < maxit:
        it += 1
        last = x0 + h >= x1
        if last:
            h = x1 - x0
        k1 = ret.f[i]
        k2 = np.asarray(f(x0 + C[0] * h, y0 + (A2 * h) * k1), dtype=float)
        k3 = np.asarray(f(x0 + C[1] * h, y0 + (A3[0] * h) * k1 + (A3[1] * h) * k2), dtype=float)
        k4 = np.asarray(
            f(x0 + C[2] * h, y0 + (A4[0] * h) * k1 + (A4[1] * h) * k2 + (A4[2] * h) * k3),
            dtype=float,
        )
        k5 = np.asarray(
            f(
                x0 + C[3] * h,
                y0 + (A5[0] * h) * k1 + (A5[1] * h) * k2 + (A5[2] * h) * k3 + (A5[3] * h) * k4,
            ),
            dtype=float,
        )
        k6 = np.asarray(
            f(
                x0 + C[4] * h,
                y0
                + (A6[0] * h) * k1
                + (A6[1] * h) * k2
                + (A6[2] * h) * k3
                + (A6[3] * h) * k4
                + (A6[4] * h) * k5,
            ),
            dtype=float,
        )
        y1 = y0 + h * (B[0] * k1 + B[2] * k3 + B[3] * k4 + B[4] * k5 + B[5] * k6)
        k7 = np.asarray(f(x0 + h, y1), dtype=float)
        err = h * (E[0] * k1 + E[2] * k3 + E[3] * k4 + E[4] * k5 + E[5] * k6 + E[6] * k7)
        erinf = float(np.max(np.abs(err))) if np.ndim(err) else abs(float(err))

        if erinf > tol:
            h = 0.2 * h * (tol / erinf) ** 0.25
            if x0 + h == x0:
                ret.message = MSG_STEP_TOO_SMALL
                logger.warning("dopri: step size underflow at x=%g", x0)
                break
            continue

        ret.ymid.append(
            y0 + h * (BMID[0] * k1 + BMID[2] * k3 + BMID[3] * k4 + BMID[4] * k5 + BMID[5] * k6 + BMID[6] * k7)
        )
        i += 1
        x_next = x1 if last else x0 + h
        ret.x.append(x_next)
        ret.y.append(y1)
        ret.f.append(k7)

        if event is not None:
            located = _locate_event(ret, event, f, i, x0, x_next, e0, y1)
            if located is not None:
                ret.iterations = it
                return ret
            e0 = event(x_next, y1)

        x0 = x_next
        y0 = y1
        grow = 4.0 if erinf == 0 else min(0.8 * (tol / erinf) ** 0.25, 4.0)
        h *= grow

    if x0 < x1 and not ret.message:
        ret.message = MSG_MAXIT
        logger.warning("dopri: maxit=%d reached at x=%g", maxit, x0)
    ret.iterations = it
    logger.debug("dopri: %d accepted steps in %d iterations", len(ret.x) - 1, it)
    return ret


def _locate_event(
    ret: DopriResult,
    event: Event,
    f: RHS,
    i: int,
    x0: float,
    x_end: float,
    e0: State,
    y_end: np.ndarray,
) -> Optional[float]:
    """Truncate ``ret`` at the first event crossing inside step ``i - 1``.

    The midpoint is checked first, then the bracket is refined with an
    Illinois-weighted secant iteration, bisecting whenever the secant point
    leaves the bracket, until no representable progress remains.
    """
    xl = x0
    xr = x0 + 0.5 * (x_end - x0)
    e1 = event(xr, ret.ymid[i - 1])
    ev = _crossed(e0, e1)
    if not np.any(ev):
        xl = xr
        xr = x_end
        e0 = e1
        e1 = event(xr, y_end)
        ev = _crossed(e0, e1)
        if not np.any(ev):
            return None

    side = 0
    sl = 1.0
    sr = 1.0
    while True:
        a0 = np.atleast_1d(np.asarray(e0, dtype=float))
        a1 = np.atleast_1d(np.asarray(e1, dtype=float))
        xi = xr
        for lo, hi in zip(a0, a1):
            if lo < 0 < hi:
                xi = min(xi, (sr * hi * xl - sl * lo * xr) / (sr * hi - sl * lo))
        if xi <= xl or xi >= xr:
            xi = 0.5 * (xl + xr)
            if xi <= xl or xi >= xr:
                break
        ei = event(xi, ret._at(xi, i - 1))
        en = _crossed(e0, ei)
        if np.any(en):
            xr, e1, ev = xi, ei, en
            sr = 1.0
            sl = sl * 0.5 if side == -1 else 1.0
            side = -1
        else:
            xl, e0 = xi, ei
            sl = 1.0
            sr = sr * 0.5 if side == 1 else 1.0
            side = 1

    xi = xr
    yi = y_end if xi == x_end else ret._at(xi, i - 1)
    ymid = ret._at(0.5 * (x0 + xi), i - 1)
    ret.x[i] = xi
    ret.y[i] = yi
    ret.f[i] = np.asarray(f(xi, yi), dtype=float)
    ret.ymid[i - 1] = ymid
    ret.events = bool(ev) if np.ndim(ev) == 0 else ev
    logger.debug("dopri: event located at x=%g", xi)
    return xi


__all__ = ["DopriResult", "dopri", "MSG_STEP_TOO_SMALL", "MSG_MAXIT"]
