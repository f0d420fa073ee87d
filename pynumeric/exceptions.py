"""Exception hierarchy for pynumeric.

Thrown exceptions are reserved for programming errors (bad shapes, wrong
input kinds) and for genuine numerical non-convergence. Expected outcomes
of well-formed problems, such as an infeasible linear program or an ODE
step-size underflow, are reported through result objects instead.
"""

from __future__ import annotations

from typing import Optional


class PyNumericError(Exception):
    """Base exception for all pynumeric errors."""


class DimensionError(PyNumericError, ValueError):
    """Input shapes are incompatible with the requested operation.

    Raised for non-square input to ``det``/``inv``/``lu``/``eig``, for SVD
    input with fewer rows than columns, for ragged nested sequences and for
    vector-only operations given matrices.
    """


class NumericalError(PyNumericError):
    """A numerical procedure broke down."""


class ConvergenceError(NumericalError):
    """An iterative kernel exhausted its iteration budget.

    Attributes:
        iterations: Number of iterations performed before giving up.
        reason: Short description of the stage that failed.
    """

    def __init__(self, message: str, iterations: int, reason: Optional[str] = None):
        self.iterations = iterations
        self.reason = reason
        super().__init__(message)


class SparseStructureError(PyNumericError):
    """Reachability bookkeeping in a sparse solve became inconsistent."""


class ComplexInputError(PyNumericError, TypeError):
    """A real-only routine was given a tensor with an imaginary part."""


__all__ = [
    "PyNumericError",
    "DimensionError",
    "NumericalError",
    "ConvergenceError",
    "SparseStructureError",
    "ComplexInputError",
]
