"""Compressed column storage (CCS) sparse matrices.

A :class:`CCSMatrix` stores column pointers, row indices and values in the
standard CSC layout. Row indices within a column need not be sorted;
routines that build matrices here emit sorted columns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.arrays import as_matrix, as_vector
from ..exceptions import DimensionError


@dataclass
class CCSMatrix:
    """Sparse matrix in compressed column storage.

    Attributes:
        col_ptr: Integer array of length ``ncols + 1``; column ``j`` occupies
            ``row_idx[col_ptr[j]:col_ptr[j + 1]]``.
        row_idx: Row index of each stored entry.
        values: Value of each stored entry.
        shape: ``(nrows, ncols)``.
    """

    col_ptr: np.ndarray
    row_idx: np.ndarray
    values: np.ndarray
    shape: Tuple[int, int]

    def __post_init__(self) -> None:
        self.col_ptr = np.asarray(self.col_ptr, dtype=int)
        self.row_idx = np.asarray(self.row_idx, dtype=int)
        self.values = np.asarray(self.values, dtype=float)
        self.shape = (int(self.shape[0]), int(self.shape[1]))
        if self.col_ptr.shape != (self.shape[1] + 1,):
            raise DimensionError(
                f"col_ptr must have length {self.shape[1] + 1}, got {self.col_ptr.shape[0]}"
            )
        if self.row_idx.shape != self.values.shape:
            raise DimensionError("row_idx and values must have the same length")

    @property
    def nnz(self) -> int:
        return int(self.col_ptr[-1])

    def column(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """Row indices and values stored in column ``j``."""
        s = slice(self.col_ptr[j], self.col_ptr[j + 1])
        return self.row_idx[s], self.values[s]


def _from_columns(columns: Sequence[Tuple[np.ndarray, np.ndarray]], shape) -> CCSMatrix:
    col_ptr = np.zeros(len(columns) + 1, dtype=int)
    rows_out = []
    vals_out = []
    for j, (rows, vals) in enumerate(columns):
        rows = np.asarray(rows, dtype=int)
        vals = np.asarray(vals, dtype=float)
        order = np.argsort(rows, kind="stable")
        rows_out.append(rows[order])
        vals_out.append(vals[order])
        col_ptr[j + 1] = col_ptr[j] + rows.size
    row_idx = np.concatenate(rows_out) if rows_out else np.zeros(0, dtype=int)
    values = np.concatenate(vals_out) if vals_out else np.zeros(0)
    return CCSMatrix(col_ptr, row_idx, values, shape)


def ccs_sparse(A) -> CCSMatrix:
    """Convert a dense matrix to CCS, dropping exact zeros."""
    A = as_matrix(A)
    columns = []
    for j in range(A.shape[1]):
        rows = np.flatnonzero(A[:, j])
        columns.append((rows, A[rows, j]))
    return _from_columns(columns, A.shape)


def ccs_full(A: CCSMatrix) -> np.ndarray:
    """Dense copy of a CCS matrix (duplicate entries are summed)."""
    out = np.zeros(A.shape)
    cols = np.repeat(np.arange(A.shape[1]), np.diff(A.col_ptr))
    np.add.at(out, (A.row_idx, cols), A.values)
    return out


def ccs_scatter(rows, cols, values, shape: Optional[Tuple[int, int]] = None) -> CCSMatrix:
    """Build a CCS matrix from coordinate triples, summing duplicates.

    Args:
        rows: Row index of each entry.
        cols: Column index of each entry.
        values: Entry values.
        shape: Matrix shape; defaults to one past the largest indices.
    """
    rows = np.asarray(rows, dtype=int).reshape(-1)
    cols = np.asarray(cols, dtype=int).reshape(-1)
    values = as_vector(values, "values")
    if not (rows.size == cols.size == values.size):
        raise DimensionError("rows, cols and values must have equal length")
    if shape is None:
        shape = (int(rows.max()) + 1 if rows.size else 0, int(cols.max()) + 1 if cols.size else 0)
    if rows.size and (rows.min() < 0 or rows.max() >= shape[0] or cols.min() < 0 or cols.max() >= shape[1]):
        raise DimensionError(f"Coordinates out of range for shape {shape}")
    order = np.lexsort((rows, cols))
    rows, cols, values = rows[order], cols[order], values[order]
    if rows.size:
        keep = np.ones(rows.size, dtype=bool)
        keep[1:] = (rows[1:] != rows[:-1]) | (cols[1:] != cols[:-1])
        starts = np.flatnonzero(keep)
        values = np.add.reduceat(values, starts)
        rows, cols = rows[starts], cols[starts]
    col_ptr = np.zeros(shape[1] + 1, dtype=int)
    np.add.at(col_ptr, cols + 1, 1)
    return CCSMatrix(np.cumsum(col_ptr), rows, values, shape)


def ccs_gather(A: CCSMatrix) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Coordinate triples ``(rows, cols, values)`` of the stored entries."""
    cols = np.repeat(np.arange(A.shape[1]), np.diff(A.col_ptr))
    return A.row_idx.copy(), cols, A.values.copy()


def ccs_dim(A: CCSMatrix) -> Tuple[int, int]:
    return A.shape


def ccs_get_block(
    A: CCSMatrix,
    rows: Optional[Sequence[int]] = None,
    cols: Optional[Sequence[int]] = None,
) -> CCSMatrix:
    """Submatrix selected by row and column index lists (``None`` keeps all)."""
    m, n = A.shape
    rows = np.arange(m) if rows is None else np.asarray(rows, dtype=int)
    cols = np.arange(n) if cols is None else np.asarray(cols, dtype=int)
    new_row = np.full(m, -1, dtype=int)
    new_row[rows] = np.arange(rows.size)
    columns = []
    for j in cols:
        r, v = A.column(j)
        mapped = new_row[r]
        keep = mapped >= 0
        columns.append((mapped[keep], v[keep]))
    return _from_columns(columns, (rows.size, cols.size))


def ccs_dot_mv(A: CCSMatrix, x) -> np.ndarray:
    """Sparse matrix times dense vector."""
    x = as_vector(x, "x")
    if x.size != A.shape[1]:
        raise DimensionError(f"Vector of length {x.size} does not match {A.shape}")
    out = np.zeros(A.shape[0])
    cols = np.repeat(np.arange(A.shape[1]), np.diff(A.col_ptr))
    np.add.at(out, A.row_idx, A.values * x[cols])
    return out


def ccs_dot(A: CCSMatrix, B: CCSMatrix) -> CCSMatrix:
    """Sparse matrix product using a dense accumulator per column."""
    if A.shape[1] != B.shape[0]:
        raise DimensionError(f"Inner dimensions differ: {A.shape} and {B.shape}")
    work = np.zeros(A.shape[0])
    mark = np.zeros(A.shape[0], dtype=bool)
    columns = []
    for j in range(B.shape[1]):
        pattern = []
        for k, bkj in zip(*B.column(j)):
            rows, vals = A.column(k)
            for r, a in zip(rows, vals):
                if not mark[r]:
                    mark[r] = True
                    pattern.append(r)
                work[r] += a * bkj
        pattern = np.asarray(pattern, dtype=int)
        columns.append((pattern, work[pattern].copy()))
        work[pattern] = 0.0
        mark[pattern] = False
    return _from_columns(columns, (A.shape[0], B.shape[1]))


def _ccs_union(A: CCSMatrix, B: CCSMatrix, func: Callable[[np.ndarray, np.ndarray], np.ndarray]) -> CCSMatrix:
    if A.shape != B.shape:
        raise DimensionError(f"Shapes differ: {A.shape} and {B.shape}")
    columns = []
    for j in range(A.shape[1]):
        ra, va = A.column(j)
        rb, vb = B.column(j)
        rows = np.union1d(ra, rb)
        a = np.zeros(rows.size)
        b = np.zeros(rows.size)
        np.add.at(a, np.searchsorted(rows, ra), va)
        np.add.at(b, np.searchsorted(rows, rb), vb)
        columns.append((rows, func(a, b)))
    return _from_columns(columns, A.shape)


def ccs_add(A: CCSMatrix, B: CCSMatrix) -> CCSMatrix:
    return _ccs_union(A, B, np.add)


def ccs_sub(A: CCSMatrix, B: CCSMatrix) -> CCSMatrix:
    return _ccs_union(A, B, np.subtract)


def ccs_mul(A: CCSMatrix, B: Union[CCSMatrix, float]) -> CCSMatrix:
    """Elementwise product with another CCS matrix or a scalar."""
    if isinstance(B, CCSMatrix):
        return _ccs_union(A, B, np.multiply)
    return CCSMatrix(A.col_ptr.copy(), A.row_idx.copy(), A.values * float(B), A.shape)


__all__ = [
    "CCSMatrix",
    "ccs_sparse",
    "ccs_full",
    "ccs_scatter",
    "ccs_gather",
    "ccs_dim",
    "ccs_get_block",
    "ccs_dot",
    "ccs_dot_mv",
    "ccs_add",
    "ccs_sub",
    "ccs_mul",
]
