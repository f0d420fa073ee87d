"""pynumeric - dense and sparse numerical linear algebra on NumPy arrays."""

__version__ = "0.1.0"

# Configuration, errors and logging
from .config import epsilon_context, get_epsilon, set_epsilon

# Convex programming
from .convex import LPResult, QPResult, Status, kkt_residuals, solve_lp, solve_qp

# Arrays and the complex tensor
from .core import (
    Op,
    Tensor,
    UnaryOp,
    binary,
    block_matrix,
    diag,
    dim,
    get_block,
    identity,
    linspace,
    rep,
    set_block,
    unary,
)

# FFT
from .dsp import fft, fft_convolve, ifft
from .exceptions import (
    ComplexInputError,
    ConvergenceError,
    DimensionError,
    NumericalError,
    PyNumericError,
    SparseStructureError,
)

# ODE integration
from .integrate import DopriResult, dopri

# Splines
from .interpolate import Spline, spline

# Dense linear algebra
from .linalg import Eigen, SVDResult, det, dot, eig, echelonize, inv, lu, lu_solve, solve, svd
from .logging import configure_logging, get_logger, set_log_level

# Unconstrained minimization
from .optimize import OptimizeResult, gradient, uncmin
from .prng import ARC4Random

# Sparse matrices
from .sparse import CCSMatrix, COOMatrix, ccs_lup, ccs_lup_solve, ccs_sparse, coo_lu

__all__ = [
    "__version__",
    # Configuration and errors
    "get_epsilon",
    "set_epsilon",
    "epsilon_context",
    "PyNumericError",
    "DimensionError",
    "NumericalError",
    "ConvergenceError",
    "SparseStructureError",
    "ComplexInputError",
    "get_logger",
    "set_log_level",
    "configure_logging",
    # Arrays
    "Op",
    "UnaryOp",
    "binary",
    "unary",
    "dim",
    "rep",
    "identity",
    "diag",
    "linspace",
    "get_block",
    "set_block",
    "block_matrix",
    "Tensor",
    "ARC4Random",
    # Dense linear algebra
    "dot",
    "inv",
    "det",
    "lu",
    "lu_solve",
    "solve",
    "echelonize",
    "Eigen",
    "eig",
    "SVDResult",
    "svd",
    # Sparse
    "CCSMatrix",
    "COOMatrix",
    "ccs_sparse",
    "ccs_lup",
    "ccs_lup_solve",
    "coo_lu",
    # Interpolation, transforms, integration
    "Spline",
    "spline",
    "fft",
    "ifft",
    "fft_convolve",
    "DopriResult",
    "dopri",
    # Optimization
    "OptimizeResult",
    "gradient",
    "uncmin",
    "LPResult",
    "QPResult",
    "Status",
    "solve_lp",
    "solve_qp",
    "kkt_residuals",
]
