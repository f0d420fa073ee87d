"""Sparse LU factorization with threshold partial pivoting.

Each column of ``A`` is solved against the columns of ``L`` computed so
far (left-looking). A depth-first search over the column dependency graph
yields the nonzero pattern in topological order, so only entries that can
become nonzero are touched.

Two bookkeeping strategies are provided:

* ``ccs_lup0`` stores original row numbers in ``L`` and maps them through
  ``Pinv`` on the fly; the mapping is applied once at the end.
* ``ccs_lup1`` stores pivot positions in ``L`` and rewrites them on every
  row swap.

Both return the same factors. Zero pivots are not detected and propagate
as ``inf``/``nan``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionError, SparseStructureError
from .ccs import CCSMatrix, _from_columns


@dataclass
class SparseLU:
    """Factors with ``A[P] == L @ U``.

    Attributes:
        L: Unit lower triangular factor (CCS).
        U: Upper triangular factor (CCS).
        P: ``P[k]`` is the original row placed at position ``k``.
        Pinv: Inverse permutation of ``P``.
    """

    L: CCSMatrix
    U: CCSMatrix
    P: np.ndarray
    Pinv: np.ndarray


class DFS:
    """Reusable scratch space for depth-first reachability.

    Args:
        n: Number of graph nodes.
    """

    def __init__(self, n: int):
        self.n = n
        self.visited = np.zeros(n, dtype=bool)

    def reach(self, seeds: Sequence[int], neighbors: Callable[[int], np.ndarray]) -> List[int]:
        """Nodes reachable from ``seeds`` in topological order.

        Raises:
            SparseStructureError: If a node index falls outside ``[0, n)``.
        """
        visited = self.visited
        postorder: List[int] = []
        for seed in seeds:
            seed = int(seed)
            self._check(seed)
            if visited[seed]:
                continue
            visited[seed] = True
            stack = [(seed, neighbors(seed), 0)]
            while stack:
                node, adj, pos = stack[-1]
                while pos < len(adj):
                    nxt = int(adj[pos])
                    pos += 1
                    self._check(nxt)
                    if not visited[nxt]:
                        stack[-1] = (node, adj, pos)
                        visited[nxt] = True
                        stack.append((nxt, neighbors(nxt), 0))
                        break
                else:
                    stack.pop()
                    postorder.append(node)
        visited[postorder] = False
        postorder.reverse()
        return postorder

    def _check(self, node: int) -> None:
        if node < 0 or node >= self.n:
            raise SparseStructureError(f"DFS reached undefined node {node} (n={self.n})")


_EMPTY = np.zeros(0, dtype=int)


def ccs_tsolve(
    T: CCSMatrix,
    b,
    bj: Optional[Sequence[int]] = None,
    dfs: Optional[DFS] = None,
) -> Tuple[np.ndarray, List[int]]:
    """Solve a sparse triangular system ``T x = b``.

    ``T`` may be lower or upper triangular; the diagonal entry of each column
    is located by search, so columns need not be sorted.

    Args:
        T: Square triangular CCS matrix.
        b: Dense right-hand side.
        bj: Indices of the nonzero entries of ``b``. Defaults to the
            nonzeros of ``b``.
        dfs: Optional :class:`DFS` scratch object to reuse.

    Returns:
        Tuple ``(x, xj)`` with the dense solution and the indices of its
        structurally nonzero entries in elimination order.
    """
    n = T.shape[0]
    if T.shape != (n, n):
        raise DimensionError(f"Triangular solve needs a square matrix, got {T.shape}")
    x = np.array(b, dtype=float)
    if x.shape != (n,):
        raise DimensionError(f"Right-hand side must have length {n}")
    if bj is None:
        bj = np.flatnonzero(x)
    if dfs is None:
        dfs = DFS(n)
    order = dfs.reach(bj, lambda j: T.row_idx[T.col_ptr[j] : T.col_ptr[j + 1]])
    with np.errstate(divide="ignore", invalid="ignore"):
        for j in order:
            rows, vals = T.column(j)
            on_diag = rows == j
            diag = vals[on_diag].sum() if on_diag.any() else 0.0
            x[j] /= diag
            off = ~on_diag
            x[rows[off]] -= vals[off] * x[j]
    return x, order


def _lup(A: CCSMatrix, threshold: float, reindex: bool) -> SparseLU:
    n = A.shape[0]
    if A.shape != (n, n):
        raise DimensionError(f"Sparse LU needs a square matrix, got {A.shape}")
    P = np.arange(n)
    Pinv = np.arange(n)
    L_rows: List[np.ndarray] = []
    L_vals: List[np.ndarray] = []
    U_cols: List[Tuple[np.ndarray, np.ndarray]] = []
    x = np.zeros(n)
    dfs = DFS(n)

    def positions(k: int) -> np.ndarray:
        rows = L_rows[k]
        return rows if reindex else Pinv[rows]

    def neighbors(k: int) -> np.ndarray:
        return positions(k) if k < len(L_rows) else _EMPTY

    with np.errstate(divide="ignore", invalid="ignore"):
        for i in range(n):
            rows, vals = A.column(i)
            seeds = Pinv[rows]
            np.add.at(x, seeds, vals)
            order = dfs.reach(seeds, neighbors)

            for k in order:
                if k < i:
                    xk = x[k]
                    if xk != 0.0:
                        x[positions(k)[1:]] -= L_vals[k][1:] * xk

            best = -1.0
            e = -1
            for k in order:
                if k > i:
                    c = abs(x[k])
                    if c > best:
                        e, best = k, c
            if abs(x[i]) < threshold * best:
                pi, pe = P[i], P[e]
                P[i], P[e] = pe, pi
                Pinv[pe], Pinv[pi] = i, e
                x[i], x[e] = x[e], x[i]
                if reindex:
                    for col in L_rows:
                        at_i = col == i
                        at_e = col == e
                        col[at_i] = e
                        col[at_e] = i
                if i not in order:
                    order.append(i)

            d = x[i]
            lower = [k for k in order if k > i]
            upper = [k for k in order if k <= i]
            lower_rows = np.asarray(lower, dtype=int)
            diag_row = i if reindex else P[i]
            stored = lower_rows if reindex else P[lower_rows]
            L_rows.append(np.concatenate(([diag_row], stored)).astype(int))
            L_vals.append(np.concatenate(([1.0], x[lower_rows] / d)))
            upper_rows = np.asarray(upper, dtype=int)
            U_cols.append((upper_rows, x[upper_rows].copy()))
            x[order] = 0.0

    L_cols = [(positions(k), L_vals[k]) for k in range(n)]
    return SparseLU(
        L=_from_columns(L_cols, (n, n)),
        U=_from_columns(U_cols, (n, n)),
        P=P,
        Pinv=Pinv,
    )


def ccs_lup0(A: CCSMatrix, threshold: float = 1.0) -> SparseLU:
    """Sparse LUP carrying ``P`` and ``Pinv`` instead of rewriting ``L``.

    Args:
        A: Square CCS matrix.
        threshold: Keep the diagonal candidate unless its magnitude is below
            ``threshold`` times the largest candidate below it. ``1`` is strict
            partial pivoting; smaller values favour sparsity.
    """
    return _lup(A, threshold, reindex=False)


def ccs_lup1(A: CCSMatrix, threshold: float = 1.0) -> SparseLU:
    """Sparse LUP rewriting stored row indices of ``L`` on each swap."""
    return _lup(A, threshold, reindex=True)


def ccs_lup(A: CCSMatrix, threshold: float = 1.0, strategy: str = "lup0") -> SparseLU:
    """Sparse LU with row pivoting; ``strategy`` is ``"lup0"`` or ``"lup1"``."""
    if strategy == "lup0":
        return ccs_lup0(A, threshold)
    if strategy == "lup1":
        return ccs_lup1(A, threshold)
    raise ValueError(f"Unknown pivoting strategy: {strategy!r}")


def ccs_lup_solve(factors: SparseLU, b: Union[np.ndarray, CCSMatrix]) -> Union[np.ndarray, CCSMatrix]:
    """Solve ``A x = b`` from sparse LU factors.

    ``b`` may be a dense vector or an ``(n, 1)`` CCS column, in which case a
    CCS column is returned.
    """
    n = factors.P.size
    dfs = DFS(n)
    if isinstance(b, CCSMatrix):
        if b.shape != (n, 1):
            raise DimensionError(f"Sparse right-hand side must have shape ({n}, 1)")
        rhs = np.zeros(n)
        pos = factors.Pinv[b.row_idx]
        np.add.at(rhs, pos, b.values)
        y, yj = ccs_tsolve(factors.L, rhs, pos, dfs)
        x, xj = ccs_tsolve(factors.U, y, yj, dfs)
        rows = np.asarray(xj, dtype=int)
        return _from_columns([(rows, x[rows])], (n, 1))
    b = np.asarray(b, dtype=float)
    if b.shape != (n,):
        raise DimensionError(f"Right-hand side must have length {n}")
    y, _ = ccs_tsolve(factors.L, b[factors.P], dfs=dfs)
    x, _ = ccs_tsolve(factors.U, y, dfs=dfs)
    return x


__all__ = [
    "SparseLU",
    "DFS",
    "ccs_tsolve",
    "ccs_lup0",
    "ccs_lup1",
    "ccs_lup",
    "ccs_lup_solve",
]
