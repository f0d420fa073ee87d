"""Compact text rendering of numbers, arrays, tensors and containers."""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from ..core.tensor import Tensor

DEFAULT_PRECISION = 4


def _format_number(x: float, precision: int) -> str:
    if x == 0:
        return "0"
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    return f"{x:.{precision}g}"


def _render(x, precision: int, out: List[str]) -> None:
    if isinstance(x, Tensor):
        out.append("{re: ")
        _render(x.re, precision, out)
        out.append(", im: ")
        _render(x.im, precision, out)
        out.append("}")
        return
    if isinstance(x, dict):
        out.append("{")
        for i, (key, value) in enumerate(x.items()):
            if i:
                out.append(", ")
            out.append(f"{key}: ")
            _render(value, precision, out)
        out.append("}")
        return
    if isinstance(x, str):
        out.append(repr(x))
        return
    if isinstance(x, (bool, np.bool_)):
        out.append("true" if x else "false")
        return
    if x is None:
        out.append("null")
        return
    arr = np.asarray(x) if not isinstance(x, (list, tuple)) else None
    if arr is not None and arr.dtype.kind == "c":
        _render(Tensor.from_complex(arr), precision, out)
        return
    if arr is not None and arr.ndim == 0:
        out.append(_format_number(float(arr), precision))
        return
    if arr is not None and arr.dtype.kind in "fiub" and arr.ndim >= 1:
        out.append(_render_array(arr.astype(float), precision))
        return
    out.append("[")
    for i, item in enumerate(x):
        if i:
            out.append(", ")
        _render(item, precision, out)
    out.append("]")


def _render_array(arr: np.ndarray, precision: int) -> str:
    cells = [_format_number(float(v), precision) for v in arr.reshape(-1)]
    width = max((len(c) for c in cells), default=0)
    padded = np.array([c.rjust(width) for c in cells], dtype=object).reshape(arr.shape)

    def nest(block, depth: int) -> str:
        if block.ndim == 1:
            return "[" + ", ".join(block.tolist()) + "]"
        sep = ",\n" + " " * (depth + 1)
        return "[" + sep.join(nest(sub, depth + 1) for sub in block) + "]"

    return nest(padded, 0)


def pretty_print(x, precision: Optional[int] = None) -> str:
    """
    Render ``x`` as compact text.

    Numbers use ``precision`` significant digits (4 by default); arrays are
    right-aligned to a common field width with one matrix row per line;
    :class:`~pynumeric.core.tensor.Tensor` values show both parts.
    """
    if precision is None:
        precision = DEFAULT_PRECISION
    if precision < 1:
        raise ValueError(f"precision must be positive, got {precision}")
    out: List[str] = []
    _render(x, precision, out)
    return "".join(out)


__all__ = ["pretty_print", "DEFAULT_PRECISION"]
