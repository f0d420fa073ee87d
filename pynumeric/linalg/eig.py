"""Eigenvalues and eigenvectors of real square matrices.

The matrix is reduced to upper Hessenberg form by Householder reflections,
then driven to quasi-triangular form by implicit double-shift (Francis) QR
sweeps. Deflation splits the problem recursively until every diagonal
block has size one or two. Each 2x2 block is triangularized by a unitary
similarity, after which eigenvectors are obtained by back substitution on
the complex triangular factor.

Conventions
-----------
``to_upper_hessenberg`` returns ``(H, Q)`` with ``H = Q A Q^T`` and
``qr_francis`` returns ``(Q, blocks)`` with ``Q H Q^T`` block upper
triangular.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

import numpy as np

from ..config import get_epsilon
from ..core.arrays import as_matrix
from ..core.tensor import Tensor
from ..exceptions import ComplexInputError, ConvergenceError
from ..logging import get_logger

logger = get_logger(__name__)

Block = Tuple[int, int]


@dataclass
class Eigen:
    """Eigen decomposition ``A @ vectors == vectors @ diag(values)``.

    Attributes:
        values: Eigenvalues as a complex :class:`Tensor` of shape ``(n,)``.
        vectors: Unit-norm eigenvectors stored column-wise, shape ``(n, n)``.
    """

    values: Tensor
    vectors: Tensor


def house(x) -> np.ndarray:
    """Unit Householder vector ``v`` such that ``(I - 2 v v^T) x`` is a multiple of e1.

    A zero input yields a zero vector, which makes the reflection the identity.
    """
    v = np.array(x, dtype=float)
    sign = 1.0 if v[0] >= 0 else -1.0
    v[0] += sign * np.linalg.norm(v)
    norm = np.linalg.norm(v)
    if norm == 0.0:
        return v
    return v / norm


def _reflect_rows(M: np.ndarray, rows: slice, v: np.ndarray, cols: slice = slice(None)) -> None:
    block = M[rows, cols]
    block -= 2.0 * np.outer(v, v @ block)


def _reflect_cols(M: np.ndarray, cols: slice, v: np.ndarray, rows: slice = slice(None)) -> None:
    block = M[rows, cols]
    block -= 2.0 * np.outer(block @ v, v)


def to_upper_hessenberg(A) -> Tuple[np.ndarray, np.ndarray]:
    """Householder reduction to upper Hessenberg form.

    Returns:
        Tuple ``(H, Q)`` with ``H = Q @ A @ Q.T``.
    """
    H = as_matrix(A, square=True).copy()
    m = H.shape[0]
    Q = np.eye(m)
    for j in range(m - 2):
        x = H[j + 1 :, j]
        if np.linalg.norm(x) > 0:
            v = house(x)
            _reflect_rows(H, slice(j + 1, m), v, slice(j, m))
            _reflect_cols(H, slice(j + 1, m), v)
            _reflect_rows(Q, slice(j + 1, m), v)
    return H, Q


def _negligible(H: np.ndarray, row: int, col: int, eps: float) -> bool:
    return abs(H[row + 1, col]) <= eps * (abs(H[row, row]) + abs(H[row + 1, row + 1]))


def _split(H: np.ndarray, Q: np.ndarray, k: int, maxiter: int) -> Tuple[np.ndarray, List[Block]]:
    """Recurse on the two diagonal blocks decoupled after row ``k``."""
    m = H.shape[0]
    Q1, B1 = qr_francis(H[: k + 1, : k + 1], maxiter)
    Q2, B2 = qr_francis(H[k + 1 :, k + 1 :], maxiter)
    Q = Q.copy()
    Q[: k + 1] = Q1 @ Q[: k + 1]
    Q[k + 1 :] = Q2 @ Q[k + 1 :]
    blocks = B1 + [(lo + k + 1, hi + k + 1) for lo, hi in B2]
    logger.debug("Deflated %d x %d Hessenberg matrix at row %d", m, m, k)
    return Q, blocks


def qr_francis(H, maxiter: int = 10000) -> Tuple[np.ndarray, List[Block]]:
    """Implicit double-shift QR iteration on an upper Hessenberg matrix.

    Args:
        H: Upper Hessenberg matrix.
        maxiter: Maximum number of Francis sweeps before giving up.

    Returns:
        Tuple ``(Q, blocks)`` where ``Q @ H @ Q.T`` is block upper triangular
        and ``blocks`` lists the inclusive index range of each 1x1 or 2x2
        diagonal block.

    Raises:
        ConvergenceError: If no subdiagonal entry becomes negligible within
            ``maxiter`` sweeps.
    """
    H = np.array(H, dtype=float)
    m = H.shape[0]
    Q = np.eye(m)
    if m < 3:
        return Q, [(0, m - 1)] if m else []
    eps = get_epsilon()
    for sweep in range(maxiter + 1):
        for j in range(m - 1):
            if _negligible(H, j, j, eps):
                return _split(H, Q, j, maxiter)
        if sweep == maxiter:
            break

        # First column of H^2 - tr H + det I for the trailing 2x2 shift pair.
        a, b = H[m - 2, m - 2], H[m - 2, m - 1]
        c, d = H[m - 1, m - 2], H[m - 1, m - 1]
        tr = a + d
        dt = a * d - b * c
        local = H[:3, :3]
        shifted = local @ local - tr * local + dt * np.eye(3)
        v = house(shifted[:, 0])
        _reflect_rows(H, slice(0, 3), v)
        _reflect_cols(H, slice(0, 3), v)
        _reflect_rows(Q, slice(0, 3), v)

        # Chase the bulge down the subdiagonal.
        for j in range(m - 2):
            last = min(m - 1, j + 3)
            v = house(H[j + 1 : last + 1, j])
            _reflect_rows(H, slice(j + 1, last + 1), v, slice(j, m))
            _reflect_cols(H, slice(j + 1, last + 1), v)
            _reflect_rows(Q, slice(j + 1, last + 1), v)

    raise ConvergenceError(
        "eigenvalue iteration does not converge -- increase maxiter?",
        iterations=maxiter,
        reason="qr_francis",
    )


def _triangularize_2x2(a: float, b: float, c: float, d: float) -> np.ndarray:
    """Unitary ``U`` with ``U @ [[a, b], [c, d]] @ U^H`` upper triangular."""
    tr = a + d
    disc = (a - d) * (a - d) + 4.0 * b * c
    if disc >= 0:
        root = np.sqrt(disc)
        lam = complex(0.5 * (tr + root if tr >= 0 else tr - root))
    else:
        lam = complex(0.5 * tr, 0.5 * np.sqrt(-disc))
    n1 = abs(a - lam) ** 2 + b * b
    n2 = c * c + abs(d - lam) ** 2
    if n1 > n2:
        u = np.array([b, lam - a], dtype=complex) / np.sqrt(n1)
    else:
        u = np.array([lam - d, c], dtype=complex) / np.sqrt(n2)
    return np.array([[np.conj(u[0]), np.conj(u[1])], [-u[1], u[0]]])


def _triangular_eigenvectors(R: np.ndarray, tol: float) -> np.ndarray:
    """Eigenvectors (as rows) of a complex upper triangular matrix."""
    n = R.shape[0]
    E = np.eye(n, dtype=complex)
    for j in range(1, n):
        for k in range(j - 1, -1, -1):
            num = -R[k, j] - R[k, k + 1 : j] @ E[j, k + 1 : j]
            den = R[k, k] - R[j, j]
            if abs(den) > tol:
                E[j, k] = num / den
            elif abs(num) <= tol:
                E[j, k] = 0.0
            else:
                # Defective eigenvalue: reuse the earlier eigenvector.
                E[j] = E[k]
                break
    return E


def eig(A: Union[np.ndarray, Tensor], maxiter: int = 10000) -> Eigen:
    """Eigenvalues and eigenvectors of a real square matrix.

    Args:
        A: Real square matrix (array or purely real :class:`Tensor`).
        maxiter: Maximum Francis sweeps per deflation stage.

    Returns:
        :class:`Eigen` with complex eigenvalues and unit-norm eigenvector
        columns.

    Raises:
        ComplexInputError: If ``A`` is a Tensor with a non-zero imaginary part.
        DimensionError: If ``A`` is not square.
        ConvergenceError: If QR iteration exhausts ``maxiter``.
    """
    if isinstance(A, Tensor):
        if not A.is_real():
            raise ComplexInputError("eig only works on real matrices")
        A = A.re
    A = as_matrix(A, square=True)
    n = A.shape[0]
    if n == 0:
        return Eigen(values=Tensor(np.zeros(0)), vectors=Tensor(np.zeros((0, 0))))

    H, Qh = to_upper_hessenberg(A)
    Qf, blocks = qr_francis(H, maxiter)
    T = Qf @ Qh
    B = T @ A @ T.T
    Q = Tensor(T)
    for lo, hi in blocks:
        if lo == hi:
            continue
        a, b = B[lo, lo], B[lo, hi]
        c, d = B[hi, lo], B[hi, hi]
        if b == 0 and c == 0:
            continue
        U = Tensor.from_complex(_triangularize_2x2(a, b, c, d))
        Q.set_rows(lo, hi, U.dot(Q.get_rows(lo, hi)))

    R = Q.dot(A).dot(Q.transjugate())
    Rc = R.to_complex()
    scale = max(float(np.max(np.abs(Rc))), 1.0)
    E = _triangular_eigenvectors(Rc, 10.0 * get_epsilon() * scale)
    E /= np.linalg.norm(E, axis=1, keepdims=True)
    vectors = Q.transjugate().dot(Tensor.from_complex(E.T))
    logger.debug("eig: %d eigenvalues from %d diagonal blocks", n, len(blocks))
    return Eigen(values=R.get_diag(), vectors=vectors)


__all__ = ["Eigen", "house", "to_upper_hessenberg", "qr_francis", "eig"]
