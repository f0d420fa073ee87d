"""Array construction helpers, the elementwise engine and the complex tensor."""

from . import arrays, elementwise
from .arrays import (
    as_matrix,
    as_vector,
    block_matrix,
    clone,
    diag,
    dim,
    get_block,
    get_diag,
    get_range,
    identity,
    linspace,
    random,
    rep,
    set_block,
    tensor,
    transpose,
)
from .elementwise import Op, UnaryOp, binary, binary_inplace, unary, unary_inplace
from .tensor import Tensor

__all__ = [
    "arrays",
    "elementwise",
    # Construction
    "dim",
    "as_vector",
    "as_matrix",
    "rep",
    "identity",
    "diag",
    "get_diag",
    "linspace",
    "clone",
    "get_block",
    "set_block",
    "get_range",
    "block_matrix",
    "tensor",
    "transpose",
    "random",
    # Elementwise
    "Op",
    "UnaryOp",
    "binary",
    "binary_inplace",
    "unary",
    "unary_inplace",
    # Complex
    "Tensor",
]
