"""Coordinate-format (COO) sparse matrices and structured grids.

COO triples carry no ordering requirement. The banded LU here works on
the row profile of the matrix (the span between the first and last stored
column of each row, widened so the envelope is monotone) and performs no
pivoting, which suits diagonally dominant systems such as spline
tridiagonals and finite-difference Laplacians.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

import numpy as np

from ..core.arrays import as_vector
from ..exceptions import DimensionError
from .ccs import CCSMatrix, ccs_scatter


@dataclass
class COOMatrix:
    """Coordinate-format sparse matrix ``A[rows[k], cols[k]] += values[k]``."""

    rows: np.ndarray
    cols: np.ndarray
    values: np.ndarray
    shape: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        self.rows = np.asarray(self.rows, dtype=int).reshape(-1)
        self.cols = np.asarray(self.cols, dtype=int).reshape(-1)
        self.values = np.asarray(self.values, dtype=float).reshape(-1)
        if not (self.rows.size == self.cols.size == self.values.size):
            raise DimensionError("rows, cols and values must have equal length")
        if self.shape is None:
            size = int(max(self.rows.max(initial=-1), self.cols.max(initial=-1))) + 1
            self.shape = (size, size)

    def to_dense(self) -> np.ndarray:
        out = np.zeros(self.shape)
        np.add.at(out, (self.rows, self.cols), self.values)
        return out


@dataclass
class COOLU:
    """Profile LU factors: ``L`` strictly lower (unit diagonal implied), ``U`` upper."""

    L: COOMatrix
    U: COOMatrix


def coo_to_ccs(A: COOMatrix) -> CCSMatrix:
    return ccs_scatter(A.rows, A.cols, A.values, A.shape)


def cdot_mv(A: COOMatrix, x) -> np.ndarray:
    """COO matrix times dense vector."""
    x = as_vector(x, "x")
    if x.size != A.shape[1]:
        raise DimensionError(f"Vector of length {x.size} does not match {A.shape}")
    out = np.zeros(A.shape[0])
    np.add.at(out, A.rows, A.values * x[A.cols])
    return out


def coo_lu(A: COOMatrix) -> COOLU:
    """Banded LU factorization without pivoting.

    Zero pivots are not detected; they surface as ``inf``/``nan``.
    """
    m = A.shape[0]
    if A.shape[0] != A.shape[1]:
        raise DimensionError(f"coo_lu needs a square matrix, got {A.shape}")
    left = np.full(m, m, dtype=int)
    right = np.full(m, -1, dtype=int)
    np.minimum.at(left, A.rows, A.cols)
    np.maximum.at(right, A.rows, A.cols)
    # Every row must at least cover its diagonal.
    left = np.minimum(left, np.arange(m))
    right = np.maximum(right, np.arange(m))
    right = np.maximum.accumulate(right)
    left = np.minimum.accumulate(left[::-1])[::-1]

    U = [np.zeros(right[i] - left[i] + 1) for i in range(m)]
    L = [np.zeros(i - left[i]) for i in range(m)]
    for i, j, v in zip(A.rows, A.cols, A.values):
        U[i][j - left[i]] += v

    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(m - 1):
            a = i - left[i]
            c = right[i] - i
            Ui = U[i]
            j = i + 1
            while j < m and left[j] <= i:
                b = i - left[j]
                Uj = U[j]
                alpha = Uj[b] / Ui[a]
                if alpha:
                    Uj[b + 1 : b + c + 1] -= alpha * Ui[a + 1 : a + c + 1]
                    L[j][b] = alpha
                j += 1

    l_rows, l_cols, l_vals = [], [], []
    u_rows, u_cols, u_vals = [], [], []
    for i in range(m):
        cols = np.arange(left[i], i)
        nz = L[i] != 0
        l_rows.append(np.full(int(nz.sum()), i))
        l_cols.append(cols[nz])
        l_vals.append(L[i][nz])
        start = i - left[i]
        ucols = np.arange(i, right[i] + 1)
        uvals = U[i][start:]
        keep = uvals != 0
        keep[0] = True
        u_rows.append(np.full(int(keep.sum()), i))
        u_cols.append(ucols[keep])
        u_vals.append(uvals[keep])

    def build(rows, cols, vals) -> COOMatrix:
        if not rows:
            return COOMatrix(np.zeros(0), np.zeros(0), np.zeros(0), (m, m))
        return COOMatrix(np.concatenate(rows), np.concatenate(cols), np.concatenate(vals), (m, m))

    return COOLU(L=build(l_rows, l_cols, l_vals), U=build(u_rows, u_cols, u_vals))


def coo_lu_solve(factors: COOLU, b) -> np.ndarray:
    """Solve ``A x = b`` given :func:`coo_lu` factors.

    ``b`` may be a vector or an ``(m, k)`` matrix of right-hand sides.
    """
    x = np.array(b, dtype=float)
    m = factors.U.shape[0]
    if x.shape[0] != m:
        raise DimensionError(f"Right-hand side has {x.shape[0]} rows, expected {m}")
    L, U = factors.L, factors.U
    l_ptr = np.searchsorted(L.rows, np.arange(m + 1))
    u_ptr = np.searchsorted(U.rows, np.arange(m + 1))
    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(m):
            s = slice(l_ptr[i], l_ptr[i + 1])
            if s.start != s.stop:
                x[i] -= L.values[s] @ x[L.cols[s]]
        for i in range(m - 1, -1, -1):
            s = slice(u_ptr[i], u_ptr[i + 1])
            cols = U.cols[s]
            vals = U.values[s]
            x[i] = (x[i] - vals[1:] @ x[cols[1:]]) / vals[0]
    return x


def cgrid(n: Union[int, Tuple[int, int]], shape: Union[str, Callable[[int, int], bool], None] = "L") -> np.ndarray:
    """Number the interior points of a grid.

    Args:
        n: Grid size, either ``n`` for an ``n x n`` grid or ``(rows, cols)``.
        shape: ``"L"`` for an L-shaped domain, ``None``/``"square"`` for the
            full square, or a predicate ``shape(i, j)``.

    Returns:
        Integer array with consecutive indices at included interior points
        and ``-1`` elsewhere (including the boundary).
    """
    if isinstance(n, int):
        n = (n, n)
    rows, cols = n
    if shape == "L":
        def inside(i, j):
            return i >= rows / 2 or j < cols / 2
    elif shape is None or shape == "square":
        def inside(i, j):
            return True
    elif callable(shape):
        inside = shape
    else:
        raise ValueError(f"Unknown grid shape: {shape!r}")
    grid = np.full((rows, cols), -1, dtype=int)
    count = 0
    for i in range(1, rows - 1):
        for j in range(1, cols - 1):
            if inside(i, j):
                grid[i, j] = count
                count += 1
    return grid


def cdelsq(g) -> COOMatrix:
    """Five-point negative Laplacian on the numbered points of a grid."""
    g = np.asarray(g, dtype=int)
    if g.ndim != 2:
        raise DimensionError("cdelsq needs a 2-D grid")
    rows, cols, vals = [], [], []
    m, n = g.shape
    for i in range(1, m - 1):
        for j in range(1, n - 1):
            here = g[i, j]
            if here < 0:
                continue
            for di, dj in ((-1, 0), (0, -1), (0, 1), (1, 0)):
                there = g[i + di, j + dj]
                if there < 0:
                    continue
                rows.append(here)
                cols.append(there)
                vals.append(-1.0)
            rows.append(here)
            cols.append(here)
            vals.append(4.0)
    size = int(g.max()) + 1 if g.size else 0
    return COOMatrix(rows, cols, vals, (size, size))


__all__ = [
    "COOMatrix",
    "COOLU",
    "coo_to_ccs",
    "cdot_mv",
    "coo_lu",
    "coo_lu_solve",
    "cgrid",
    "cdelsq",
]
