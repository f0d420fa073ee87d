"""Sparse matrices in compressed-column (CCS) and coordinate (COO) form.

CCS matrices support products, elementwise arithmetic and a threshold
partial-pivoting LU with depth-first-search triangular solves. COO
matrices carry the banded (profile) LU used for grid Laplacians and the
spline systems.
"""

from .ccs import (
    CCSMatrix,
    ccs_add,
    ccs_dim,
    ccs_dot,
    ccs_dot_mv,
    ccs_full,
    ccs_gather,
    ccs_get_block,
    ccs_mul,
    ccs_scatter,
    ccs_sparse,
    ccs_sub,
)
from .ccs_lu import DFS, SparseLU, ccs_lup, ccs_lup0, ccs_lup1, ccs_lup_solve, ccs_tsolve
from .coord import COOLU, COOMatrix, cdelsq, cdot_mv, cgrid, coo_lu, coo_lu_solve, coo_to_ccs

__all__ = [
    # CCS
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
    # CCS LU
    "SparseLU",
    "DFS",
    "ccs_tsolve",
    "ccs_lup0",
    "ccs_lup1",
    "ccs_lup",
    "ccs_lup_solve",
    # COO
    "COOMatrix",
    "COOLU",
    "coo_to_ccs",
    "cdot_mv",
    "coo_lu",
    "coo_lu_solve",
    "cgrid",
    "cdelsq",
]
