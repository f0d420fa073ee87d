"""Piecewise cubic Hermite splines.

A :class:`Spline` stores, at every knot, the value and slope seen by the
interval that starts there (``yl``, ``kl``) and by the interval that ends
there (``yr``, ``kr``). Keeping both sides allows jumps at knots; splines
built by :func:`spline` have ``yl == yr`` and ``kl == kr``.
"""

from __future__ import annotations

from typing import List, Optional, Union

import numpy as np

from ..core.arrays import as_vector
from ..exceptions import DimensionError
from ..sparse.ccs import ccs_scatter
from ..sparse.ccs_lu import ccs_lup, ccs_lup_solve
from ..sparse.coord import COOMatrix, coo_lu, coo_lu_solve

Boundary = Union[None, float, np.ndarray, str]


class Spline:
    """Cubic Hermite interpolant over sorted knots.

    Args:
        x: Increasing knot abscissae, shape ``(n,)``.
        yl: Values at the start of each interval, shape ``(n,)`` or ``(n, m)``.
        yr: Values at the end of each interval.
        kl: Slopes at the start of each interval.
        kr: Slopes at the end of each interval.
    """

    def __init__(self, x, yl, yr, kl, kr):
        self.x = as_vector(x, "x")
        self.yl = np.asarray(yl, dtype=float)
        self.yr = np.asarray(yr, dtype=float)
        self.kl = np.asarray(kl, dtype=float)
        self.kr = np.asarray(kr, dtype=float)
        n = self.x.size
        if n < 2:
            raise DimensionError("A spline needs at least two knots")
        for name in ("yl", "yr", "kl", "kr"):
            if getattr(self, name).shape[0] != n:
                raise DimensionError(f"{name} must have one entry per knot")

    def _interval(self, x0: float) -> int:
        x = self.x
        p, q = 0, x.size - 1
        while q - p > 1:
            mid = (p + q) // 2
            if x[mid] <= x0:
                p = mid
            else:
                q = mid
        return p

    def _coefficients(self, p: int):
        dx = self.x[p + 1] - self.x[p]
        dy = self.yr[p + 1] - self.yl[p]
        a = self.kl[p] * dx - dy
        b = -self.kr[p + 1] * dx + dy
        return dx, a, b

    def _at(self, x0: float, p: int) -> np.ndarray:
        dx, a, b = self._coefficients(p)
        t = (x0 - self.x[p]) / dx
        s = t * (1 - t)
        return (1 - t) * self.yl[p] + t * self.yr[p + 1] + a * (s * (1 - t)) + b * (s * t)

    def at(self, x0):
        """Evaluate the spline at a scalar or an array of abscissae.

        Points outside the knot range are extrapolated with the first or last
        cubic piece.
        """
        if np.ndim(x0) == 0:
            x0 = float(x0)
            value = self._at(x0, self._interval(x0))
            return float(value) if np.ndim(value) == 0 else value
        points = np.asarray(x0, dtype=float)
        values = [self._at(float(v), self._interval(float(v))) for v in points.reshape(-1)]
        out = np.asarray(values, dtype=float)
        return out.reshape(points.shape + self.yl.shape[1:])

    __call__ = at

    def diff(self) -> "Spline":
        """Derivative spline (piecewise quadratic in Hermite form)."""
        x = self.x
        n = x.size
        pl = np.empty_like(self.kl)
        pr = np.empty_like(self.kr)
        for i in range(n - 1):
            dx = x[i + 1] - x[i]
            dy = self.yr[i + 1] - self.yl[i]
            pl[i] = (6 * dy - 4 * dx * self.kl[i] - 2 * dx * self.kr[i + 1]) / (dx * dx)
            pr[i + 1] = (-6 * dy + 2 * dx * self.kl[i] + 4 * dx * self.kr[i + 1]) / (dx * dx)
        pl[n - 1] = pr[n - 1]
        pr[0] = pl[0]
        return Spline(x, self.kl, self.kr, pl, pr)

    def roots(self) -> np.ndarray:
        """Abscissae where a scalar spline changes sign or vanishes.

        Each piece is split at the critical points of its cubic into
        monotonic segments, and each bracketed sign change is refined with
        the Illinois variant of regula falsi until the bracket collapses.
        Sign changes across a jump at a knot are reported at the knot.
        """
        if self.yl.ndim != 1:
            raise DimensionError("roots() requires a scalar-valued spline")
        x = self.x
        found: List[float] = []

        def record(value: float) -> None:
            if not found or value != found[-1]:
                found.append(value)

        for p in range(x.size - 1):
            if p > 0 and self.yr[p] * self.yl[p] < 0:
                record(float(x[p]))
            dx, a, b = self._coefficients(p)
            y0, y1 = self.yl[p], self.yr[p + 1]

            def f(t, y0=y0, y1=y1, a=a, b=b):
                s = t * (1 - t)
                return (1 - t) * y0 + t * y1 + a * s * (1 - t) + b * s * t

            breaks = [0.0] + _critical_points(y1 - y0 + a, 2 * (b - 2 * a), 3 * (a - b)) + [1.0]
            for t0, t1 in zip(breaks[:-1], breaks[1:]):
                f0, f1 = f(t0), f(t1)
                if f0 == 0:
                    record(float(x[p] + t0 * dx))
                elif f0 * f1 < 0:
                    t = _illinois(f, t0, t1, f0, f1)
                    record(float(x[p] + t * dx))
            if p == x.size - 2 and self.yr[p + 1] == 0:
                record(float(x[p + 1]))
        return np.asarray(found)


def _critical_points(c0: float, c1: float, c2: float) -> List[float]:
    """Sorted roots in (0, 1) of ``c0 + c1 t + c2 t^2``."""
    roots: List[float] = []
    if c2 == 0:
        if c1 != 0:
            roots.append(-c0 / c1)
    else:
        disc = c1 * c1 - 4 * c2 * c0
        if disc >= 0:
            root = np.sqrt(disc)
            roots.extend([(-c1 - root) / (2 * c2), (-c1 + root) / (2 * c2)])
    return sorted(float(t) for t in roots if 0.0 < t < 1.0)


def _illinois(f, lo: float, hi: float, flo: float, fhi: float) -> float:
    """Refine a bracketed root until no representable progress remains."""
    side = 0
    while True:
        t = (lo * fhi - hi * flo) / (fhi - flo)
        if not lo < t < hi:
            t = 0.5 * (lo + hi)
            if not lo < t < hi:
                break
        ft = f(t)
        if ft == 0:
            return t
        if (ft < 0) == (flo < 0):
            lo, flo = t, ft
            if side == -1:
                fhi *= 0.5
            side = -1
        else:
            hi, fhi = t, ft
            if side == 1:
                flo *= 0.5
            side = 1
    return lo if abs(flo) <= abs(fhi) else hi


def _boundary_kind(k1: Boundary, kn: Boundary) -> bool:
    named = [isinstance(k, str) for k in (k1, kn)]
    if not any(named):
        return False
    if all(named) and k1 == "periodic" and kn == "periodic":
        return True
    raise ValueError(f"Periodic splines need k1 and kn both \"periodic\", got {k1!r} and {kn!r}")


def spline(x, y, k1: Boundary = None, kn: Boundary = None) -> Spline:
    """Build a C1 cubic spline through ``(x[i], y[i])``.

    Args:
        x: Increasing knots, shape ``(n,)``.
        y: Values, shape ``(n,)`` or ``(n, m)`` for vector-valued data.
        k1: Slope at ``x[0]``. ``None`` gives the natural condition (zero
            second derivative); a number clamps the slope; ``"periodic"``
            on both ends makes the spline periodic.
        kn: Slope at ``x[-1]``, same conventions as ``k1``.

    Returns:
        :class:`Spline` with ``yl == yr == y`` and ``kl == kr``.
    """
    x = as_vector(x, "x")
    y = np.asarray(y, dtype=float)
    n = x.size
    if n < 2 or y.shape[0] != n:
        raise DimensionError("spline needs at least two knots and one value per knot")
    if np.any(np.diff(x) <= 0):
        raise ValueError("Knots must be strictly increasing")
    dx = np.diff(x)
    dy = np.diff(y, axis=0)
    periodic = _boundary_kind(k1, kn)
    scale = (3.0 / (dx * dx)).reshape((-1,) + (1,) * (y.ndim - 1))
    weighted = scale * dy

    rows: List[int] = []
    cols: List[int] = []
    vals: List[float] = []
    size = n - 1 if periodic else n
    rhs = np.zeros((size,) + y.shape[1:])

    if periodic:
        rhs[0] = weighted[n - 2] + weighted[0]
        rows += [0, 0, 0]
        cols += [n - 2, 0, 1 % size]
        vals += [1 / dx[n - 2], 2 / dx[n - 2] + 2 / dx[0], 1 / dx[0]]
    elif k1 is None:
        rhs[0] = weighted[0]
        rows += [0, 0]
        cols += [0, 1]
        vals += [2 / dx[0], 1 / dx[0]]
    else:
        rhs[0] = k1
        rows.append(0)
        cols.append(0)
        vals.append(1.0)

    for i in range(1, n - 1):
        rhs[i] = weighted[i - 1] + weighted[i]
        rows += [i, i, i]
        cols += [i - 1, i, (i + 1) % size if periodic else i + 1]
        vals += [1 / dx[i - 1], 2 / dx[i - 1] + 2 / dx[i], 1 / dx[i]]

    if not periodic:
        if kn is None:
            rhs[n - 1] = weighted[n - 2]
            rows += [n - 1, n - 1]
            cols += [n - 2, n - 1]
            vals += [1 / dx[n - 2], 2 / dx[n - 2]]
        else:
            rhs[n - 1] = kn
            rows.append(n - 1)
            cols.append(n - 1)
            vals.append(1.0)

    if periodic:
        factors = ccs_lup(ccs_scatter(rows, cols, vals, (size, size)))
        columns = rhs.reshape(size, -1)
        solved = np.column_stack([ccs_lup_solve(factors, columns[:, j]) for j in range(columns.shape[1])])
        k = np.concatenate([solved, solved[:1]]).reshape((n,) + y.shape[1:])
    else:
        k = coo_lu_solve(coo_lu(COOMatrix(rows, cols, vals, (n, n))), rhs)
    return Spline(x, y, y, k, k)


__all__ = ["Spline", "spline"]
