"""Finite-difference gradient with adaptive per-coordinate steps."""

from __future__ import annotations

import math

import numpy as np

from ..exceptions import NumericalError
from .core import Array, Objective

MAX_HALVINGS = 20
ERROR_BOUND = 1e-3


def gradient(f: Objective, x: Array) -> Array:
    """Central-difference gradient of ``f`` at ``x``.

    For each coordinate the step starts at ``max(1e-6 * |f(x)|, 1e-8)``. The
    central estimate is compared with both one-sided estimates; while their
    scaled disagreement exceeds ``ERROR_BOUND`` (or a shifted evaluation
    returns NaN) the step is halved, at most ``MAX_HALVINGS`` times.

    Raises:
        NumericalError: If ``f(x)`` is NaN or a coordinate never meets the
            error bound.
    """
    x = np.asarray(x, dtype=float)
    f0 = float(f(x))
    if math.isnan(f0):
        raise NumericalError("gradient: f(x) is a NaN!")
    xh = x.copy()
    grad = np.zeros_like(x)
    for i in range(x.size):
        h = max(1e-6 * abs(f0), 1e-8)
        for _ in range(MAX_HALVINGS):
            xh[i] = x[i] + h
            f1 = float(f(xh))
            xh[i] = x[i] - h
            f2 = float(f(xh))
            xh[i] = x[i]
            if math.isnan(f1) or math.isnan(f2):
                h /= 2
                continue
            central = (f1 - f2) / (2 * h)
            forward = (f1 - f0) / h
            backward = (f0 - f2) / h
            scale = max(
                abs(central), abs(f0), abs(f1), abs(f2),
                abs(x[i] - h), abs(x[i]), abs(x[i] + h), 1e-8,
            )
            spread = max(abs(forward - central), abs(backward - central), abs(forward - backward))
            errest = min(spread / scale, h / scale)
            if errest <= ERROR_BOUND:
                grad[i] = central
                break
            h /= 2
        else:
            raise NumericalError(f"Numerical gradient fails for coordinate {i}")
    return grad


__all__ = ["gradient", "MAX_HALVINGS", "ERROR_BOUND"]
