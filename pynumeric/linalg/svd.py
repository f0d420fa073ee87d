"""Thin singular value decomposition (Golub-Reinsch).

Householder bidiagonalization followed by implicit-shift QR sweeps on the
bidiagonal form. Each singular value gets at most ``ITMAX`` sweeps.

References:
    - Golub & Reinsch, "Singular value decomposition and least squares
      solutions", Numer. Math. 14 (1970)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..config import get_epsilon
from ..core.arrays import as_matrix
from ..exceptions import ConvergenceError, DimensionError
from ..logging import get_logger

logger = get_logger(__name__)

ITMAX = 50


@dataclass
class SVDResult:
    """``A == U @ diag(S) @ V.T`` with ``S`` non-negative and descending."""

    U: np.ndarray
    S: np.ndarray
    V: np.ndarray


def _pythag(a: float, b: float) -> float:
    a = abs(a)
    b = abs(b)
    if a > b:
        return a * math.sqrt(1.0 + (b * b / a / a))
    if b == 0.0:
        return a
    return b * math.sqrt(1.0 + (a * a / b / b))


def _rotate(M: np.ndarray, i: int, j: int, c: float, s: float) -> None:
    """Apply a Givens rotation to columns ``i`` and ``j`` of ``M``."""
    y = M[:, i].copy()
    z = M[:, j].copy()
    M[:, i] = y * c + z * s
    M[:, j] = -y * s + z * c


def svd(A) -> SVDResult:
    """Thin SVD of an ``m x n`` matrix with ``m >= n``.

    Args:
        A: Real matrix.

    Returns:
        :class:`SVDResult` with ``U`` of shape ``(m, n)``, ``S`` of shape
        ``(n,)`` and ``V`` of shape ``(n, n)``.

    Raises:
        DimensionError: If ``A`` has fewer rows than columns.
        ConvergenceError: If a singular value fails to converge within
            ``ITMAX`` sweeps.
    """
    u = as_matrix(A).copy()
    m, n = u.shape
    if m < n:
        raise DimensionError("Need more rows than columns")
    prec = get_epsilon()
    tolerance = 1.0e-64 / prec
    e = np.zeros(n)
    q = np.zeros(n)
    v = np.zeros((n, n))

    # Householder reduction to bidiagonal form.
    g = 0.0
    x = 0.0
    l = 0  # noqa: E741
    for i in range(n):
        e[i] = g
        l = i + 1  # noqa: E741
        s = float(u[i:, i] @ u[i:, i])
        if s <= tolerance:
            g = 0.0
        else:
            f = u[i, i]
            g = math.sqrt(s)
            if f >= 0.0:
                g = -g
            h = f * g - s
            u[i, i] = f - g
            for j in range(l, n):
                f = (u[i:, i] @ u[i:, j]) / h
                u[i:, j] += f * u[i:, i]
        q[i] = g
        s = float(u[i, l:] @ u[i, l:])
        if s <= tolerance:
            g = 0.0
        else:
            f = u[i, i + 1]
            g = math.sqrt(s)
            if f >= 0.0:
                g = -g
            h = f * g - s
            u[i, i + 1] = f - g
            e[l:] = u[i, l:] / h
            for j in range(l, m):
                s = float(u[j, l:] @ u[i, l:])
                u[j, l:] += s * e[l:]
        y = abs(q[i]) + abs(e[i])
        if y > x:
            x = y

    # Accumulation of right-hand transformations.
    for i in range(n - 1, -1, -1):
        if g != 0.0:
            h = g * u[i, i + 1]
            v[l:, i] = u[i, l:] / h
            for j in range(l, n):
                s = float(u[i, l:] @ v[l:, j])
                v[l:, j] += s * v[l:, i]
        v[i, l:] = 0.0
        v[l:, i] = 0.0
        v[i, i] = 1.0
        g = e[i]
        l = i  # noqa: E741

    # Accumulation of left-hand transformations.
    for i in range(n - 1, -1, -1):
        l = i + 1  # noqa: E741
        g = q[i]
        u[i, l:n] = 0.0
        if g != 0.0:
            h = u[i, i] * g
            for j in range(l, n):
                f = (u[l:, i] @ u[l:, j]) / h
                u[i:, j] += f * u[i:, i]
            u[i:, i] /= g
        else:
            u[i:, i] = 0.0
        u[i, i] += 1.0

    # Diagonalization of the bidiagonal form.
    prec = prec * x
    for k in range(n - 1, -1, -1):
        for iteration in range(ITMAX):
            converged = False
            for l in range(k, -1, -1):  # noqa: E741
                if abs(e[l]) <= prec:
                    converged = True
                    break
                if abs(q[l - 1]) <= prec:
                    break
            if not converged:
                # Cancellation of e[l] when l > 0.
                c = 0.0
                s = 1.0
                l1 = l - 1
                for i in range(l, k + 1):
                    f = s * e[i]
                    e[i] = c * e[i]
                    if abs(f) <= prec:
                        break
                    g = q[i]
                    h = _pythag(f, g)
                    q[i] = h
                    c = g / h
                    s = -f / h
                    _rotate(u, l1, i, c, s)

            z = q[k]
            if l == k:
                if z < 0.0:
                    q[k] = -z
                    v[:, k] = -v[:, k]
                break
            if iteration >= ITMAX - 1:
                raise ConvergenceError(
                    f"SVD: singular value {k} did not converge in {ITMAX} iterations",
                    iterations=ITMAX,
                    reason="svd",
                )

            # Shift from the bottom 2x2 minor.
            x = q[l]
            y = q[k - 1]
            g = e[k - 1]
            h = e[k]
            f = ((y - z) * (y + z) + (g - h) * (g + h)) / (2.0 * h * y)
            g = _pythag(f, 1.0)
            if f < 0.0:
                f = ((x - z) * (x + z) + h * (y / (f - g) - h)) / x
            else:
                f = ((x - z) * (x + z) + h * (y / (f + g) - h)) / x

            # Next QR transformation.
            c = 1.0
            s = 1.0
            for i in range(l + 1, k + 1):
                g = e[i]
                y = q[i]
                h = s * g
                g = c * g
                z = _pythag(f, h)
                e[i - 1] = z
                c = f / z
                s = h / z
                f = x * c + g * s
                g = -x * s + g * c
                h = y * s
                y = y * c
                _rotate(v, i - 1, i, c, s)
                z = _pythag(f, h)
                q[i - 1] = z
                c = f / z
                s = h / z
                f = c * g + s * y
                x = -s * g + c * y
                _rotate(u, i - 1, i, c, s)
            e[l] = 0.0
            e[k] = f
            q[k] = x

    q[q < prec] = 0.0
    order = np.argsort(-q, kind="stable")
    logger.debug("svd: %d x %d matrix, largest singular value %g", m, n, q[order[0]] if n else 0.0)
    return SVDResult(U=u[:, order], S=q[order], V=v[:, order])


__all__ = ["SVDResult", "svd", "ITMAX"]
