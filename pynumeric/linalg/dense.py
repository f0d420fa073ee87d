"""Dense matrix products, inverse, determinant and LU factorization.

Singular systems are not detected: a zero pivot propagates as ``inf`` or
``nan`` through the result, and callers must check the output. ``det`` is
the exception and returns ``0.0`` as soon as a pivot column is zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from ..core.arrays import as_matrix
from ..exceptions import DimensionError

ArrayLike = Union[float, np.ndarray]


@dataclass
class LUDecomposition:
    """Packed LU factors of a square matrix.

    Attributes:
        lu: Unit lower triangle (below the diagonal) and upper triangle of
            the factorization of the row-permuted matrix.
        pivots: ``pivots[k]`` is the row swapped with row ``k`` at step ``k``.
    """

    lu: np.ndarray
    pivots: np.ndarray

    @property
    def n(self) -> int:
        return self.lu.shape[0]


@dataclass
class Echelon:
    """Reduced row echelon form produced by :func:`echelonize`.

    ``I @ A_original == A`` and ``A[:, P]`` is the identity matrix.
    """

    I: np.ndarray  # noqa: E741
    A: np.ndarray
    P: np.ndarray


def dot(x, y) -> ArrayLike:
    """Matrix, vector or scalar product with shape checking.

    Supports vector-vector (inner product), matrix-vector, vector-matrix
    and matrix-matrix products. Scalars scale the other operand.
    """
    a = np.asarray(x, dtype=float)
    b = np.asarray(y, dtype=float)
    if a.ndim == 0 or b.ndim == 0:
        return a * b
    if a.ndim > 2 or b.ndim > 2:
        raise DimensionError("dot supports only vectors and matrices")
    inner_a = a.shape[-1]
    inner_b = b.shape[0]
    if inner_a != inner_b:
        raise DimensionError(f"dot: inner dimensions differ ({a.shape} vs {b.shape})")
    result = np.dot(a, b)
    if result.ndim == 0:
        return float(result)
    return result


def inv(A) -> np.ndarray:
    """Inverse by Gauss-Jordan elimination with partial pivoting.

    Raises:
        DimensionError: If ``A`` is not square.
    """
    a = as_matrix(A, square=True).copy()
    n = a.shape[0]
    out = np.eye(n)
    with np.errstate(divide="ignore", invalid="ignore"):
        for j in range(n):
            p = j + int(np.argmax(np.abs(a[j:, j])))
            if p != j:
                a[[j, p]] = a[[p, j]]
                out[[j, p]] = out[[p, j]]
            pivot = a[j, j]
            a[j, j:] /= pivot
            out[j] /= pivot
            factors = a[:, j].copy()
            factors[j] = 0.0
            a[:, j:] -= np.outer(factors, a[j, j:])
            out -= np.outer(factors, out[j])
    return out


def det(A) -> float:
    """Determinant by elimination with partial pivoting.

    Each row swap negates the sign; a zero pivot column returns ``0.0``.
    """
    a = as_matrix(A, square=True).copy()
    n = a.shape[0]
    result = 1.0
    for j in range(n - 1):
        p = j + int(np.argmax(np.abs(a[j:, j])))
        if a[p, j] == 0.0:
            return 0.0
        if p != j:
            a[[j, p]] = a[[p, j]]
            result = -result
        pivot = a[j, j]
        factors = a[j + 1 :, j] / pivot
        a[j + 1 :, j + 1 :] -= np.outer(factors, a[j, j + 1 :])
        result *= pivot
    if n:
        result *= a[n - 1, n - 1]
    return float(result)


def lu(A, in_place: bool = False) -> LUDecomposition:
    """LU factorization with partial pivoting.

    Args:
        A: Square matrix.
        in_place: Factor ``A`` itself instead of a copy. ``A`` must then be
            a float64 ndarray; its contents are overwritten by the factors.

    Returns:
        :class:`LUDecomposition` usable with :func:`lu_solve`.
    """
    if in_place:
        if not isinstance(A, np.ndarray) or A.dtype != np.float64:
            raise TypeError("in_place factorization requires a float64 ndarray")
        a = as_matrix(A, square=True)
    else:
        a = as_matrix(A, square=True).copy()
    n = a.shape[0]
    pivots = np.arange(n)
    with np.errstate(divide="ignore", invalid="ignore"):
        for k in range(n):
            p = k + int(np.argmax(np.abs(a[k:, k])))
            pivots[k] = p
            if p != k:
                a[[k, p]] = a[[p, k]]
            a[k + 1 :, k] /= a[k, k]
            a[k + 1 :, k + 1 :] -= np.outer(a[k + 1 :, k], a[k, k + 1 :])
    return LUDecomposition(lu=a, pivots=pivots)


def lu_solve(factors: LUDecomposition, b) -> np.ndarray:
    """Solve ``A x = b`` from precomputed LU factors.

    ``b`` may be a vector or an ``(n, k)`` matrix of right-hand sides.
    """
    lu_mat = factors.lu
    n = factors.n
    x = np.array(b, dtype=float)
    if x.ndim not in (1, 2) or x.shape[0] != n:
        raise DimensionError(f"Right-hand side of shape {x.shape} does not match n={n}")
    for k in range(n):
        p = factors.pivots[k]
        if p != k:
            x[[k, p]] = x[[p, k]]
    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(1, n):
            x[i] -= lu_mat[i, :i] @ x[:i]
        for i in range(n - 1, -1, -1):
            x[i] = (x[i] - lu_mat[i, i + 1 :] @ x[i + 1 :]) / lu_mat[i, i]
    return x


def solve(A, b, fast: bool = False) -> np.ndarray:
    """Solve ``A x = b``; ``fast`` factors ``A`` in place."""
    return lu_solve(lu(A, in_place=fast), b)


def echelonize(A) -> Echelon:
    """Reduce a full-row-rank matrix to reduced row echelon form.

    For each row the largest-magnitude column is chosen as pivot, so
    ``P`` lists one pivot column per row and ``I`` is the inverse of
    ``A[:, P]``.
    """
    a = as_matrix(A).copy()
    m, n = a.shape
    ident = np.eye(m)
    pivots = np.zeros(m, dtype=int)
    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(m):
            k = int(np.argmax(np.abs(a[i])))
            pivots[i] = k
            scale = a[i, k]
            ident[i] /= scale
            a[i] /= scale
            for j in range(m):
                if j == i:
                    continue
                factor = a[j, k]
                a[j] -= a[i] * factor
                ident[j] -= ident[i] * factor
    return Echelon(I=ident, A=a, P=pivots)


__all__ = [
    "LUDecomposition",
    "Echelon",
    "dot",
    "inv",
    "det",
    "lu",
    "lu_solve",
    "solve",
    "echelonize",
]
