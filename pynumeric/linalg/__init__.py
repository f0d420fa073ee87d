"""Dense linear algebra: LU, inverse, determinant, eigen and singular values."""

from .dense import Echelon, LUDecomposition, det, dot, echelonize, inv, lu, lu_solve, solve
from .eig import Eigen, eig, house, qr_francis, to_upper_hessenberg
from .svd import SVDResult, svd

__all__ = [
    # LU and friends
    "LUDecomposition",
    "Echelon",
    "dot",
    "inv",
    "det",
    "lu",
    "lu_solve",
    "solve",
    "echelonize",
    # Eigenvalues
    "Eigen",
    "house",
    "to_upper_hessenberg",
    "qr_francis",
    "eig",
    # SVD
    "SVDResult",
    "svd",
]
