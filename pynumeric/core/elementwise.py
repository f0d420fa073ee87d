"""Elementwise arithmetic and reductions.

Operators are named by enum members and dispatched through a table of
NumPy ufuncs, so every binary operation shares a single broadcasting loop.
Operands may be scalars or arrays of any rank.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

import numpy as np

from ..exceptions import DimensionError

ArrayLike = Union[float, int, np.ndarray]


class Op(Enum):
    """Binary elementwise operators."""

    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    AND = "and"
    OR = "or"
    XOR = "xor"
    LSHIFT = "lshift"
    RSHIFT = "rshift"
    RRSHIFT = "rrshift"
    EQ = "eq"
    NEQ = "neq"
    LT = "lt"
    GT = "gt"
    LEQ = "leq"
    GEQ = "geq"


class UnaryOp(Enum):
    """Unary elementwise operators."""

    NEG = "neg"
    BNOT = "bnot"
    NOT = "not"
    ABS = "abs"
    ACOS = "acos"
    ASIN = "asin"
    ATAN = "atan"
    CEIL = "ceil"
    COS = "cos"
    EXP = "exp"
    FLOOR = "floor"
    LOG = "log"
    ROUND = "round"
    SIN = "sin"
    SQRT = "sqrt"
    TAN = "tan"
    ISNAN = "isnan"
    ISFINITE = "isfinite"


def _rrshift(x, y):
    # Unsigned (zero-fill) right shift on 32-bit words.
    xi = np.asarray(x).astype(np.int64) & 0xFFFFFFFF
    return np.right_shift(xi, np.asarray(y).astype(np.int64) & 31)


def _int_op(ufunc):
    def apply(x, y):
        return ufunc(np.asarray(x).astype(np.int64), np.asarray(y).astype(np.int64))

    return apply


_BINARY = {
    Op.ADD: np.add,
    Op.SUB: np.subtract,
    Op.MUL: np.multiply,
    Op.DIV: np.true_divide,
    Op.MOD: np.fmod,
    Op.AND: np.logical_and,
    Op.OR: np.logical_or,
    Op.XOR: _int_op(np.bitwise_xor),
    Op.LSHIFT: _int_op(np.left_shift),
    Op.RSHIFT: _int_op(np.right_shift),
    Op.RRSHIFT: _rrshift,
    Op.EQ: np.equal,
    Op.NEQ: np.not_equal,
    Op.LT: np.less,
    Op.GT: np.greater,
    Op.LEQ: np.less_equal,
    Op.GEQ: np.greater_equal,
}

# Operators that can write their result into a float array in place.
_INPLACE = {Op.ADD, Op.SUB, Op.MUL, Op.DIV, Op.MOD}

_UNARY = {
    UnaryOp.NEG: np.negative,
    UnaryOp.BNOT: lambda x: np.invert(np.asarray(x).astype(np.int64)),
    UnaryOp.NOT: np.logical_not,
    UnaryOp.ABS: np.abs,
    UnaryOp.ACOS: np.arccos,
    UnaryOp.ASIN: np.arcsin,
    UnaryOp.ATAN: np.arctan,
    UnaryOp.CEIL: np.ceil,
    UnaryOp.COS: np.cos,
    UnaryOp.EXP: np.exp,
    UnaryOp.FLOOR: np.floor,
    UnaryOp.LOG: np.log,
    UnaryOp.ROUND: lambda x: np.floor(np.asarray(x, dtype=float) + 0.5),
    UnaryOp.SIN: np.sin,
    UnaryOp.SQRT: np.sqrt,
    UnaryOp.TAN: np.tan,
    UnaryOp.ISNAN: np.isnan,
    UnaryOp.ISFINITE: np.isfinite,
}

_UNARY_INPLACE = {
    UnaryOp.NEG,
    UnaryOp.ABS,
    UnaryOp.ACOS,
    UnaryOp.ASIN,
    UnaryOp.ATAN,
    UnaryOp.CEIL,
    UnaryOp.COS,
    UnaryOp.EXP,
    UnaryOp.FLOOR,
    UnaryOp.LOG,
    UnaryOp.SIN,
    UnaryOp.SQRT,
    UnaryOp.TAN,
}


def _check_broadcast(x, y) -> None:
    try:
        np.broadcast_shapes(np.shape(x), np.shape(y))
    except ValueError as exc:
        raise DimensionError(
            f"Operands with shapes {np.shape(x)} and {np.shape(y)} do not broadcast"
        ) from exc


def binary(op: Op, x: ArrayLike, y: ArrayLike, *more: ArrayLike) -> np.ndarray:
    """Apply ``op`` left to right over two or more operands.

    Args:
        op: Operator to apply.
        x: First operand (scalar or array).
        y: Second operand.
        *more: Further operands folded in from the left.

    Returns:
        Result array (or NumPy scalar for scalar operands).

    Raises:
        DimensionError: If operand shapes do not broadcast.
    """
    func = _BINARY[Op(op)]
    acc = x
    for operand in (y,) + more:
        _check_broadcast(acc, operand)
        acc = func(np.asarray(acc, dtype=float) if _is_float_op(op) else acc, operand)
    return acc


def _is_float_op(op: Op) -> bool:
    return Op(op) in _INPLACE


def binary_inplace(op: Op, x: np.ndarray, y: ArrayLike) -> np.ndarray:
    """Apply ``op`` writing the result into ``x``.

    ``x`` must be a float ndarray whose shape is the broadcast result.
    """
    op = Op(op)
    if op not in _INPLACE:
        raise ValueError(f"Operator {op.value!r} has no in-place form")
    if not isinstance(x, np.ndarray):
        raise TypeError("In-place target must be a numpy array")
    _check_broadcast(x, y)
    _BINARY[op](x, y, out=x)
    return x


def unary(op: UnaryOp, x: ArrayLike) -> np.ndarray:
    """Apply a unary operator elementwise."""
    return _UNARY[UnaryOp(op)](x)


def unary_inplace(op: UnaryOp, x: np.ndarray) -> np.ndarray:
    """Apply a unary operator writing into the float array ``x``."""
    op = UnaryOp(op)
    if op not in _UNARY_INPLACE:
        raise ValueError(f"Operator {op.value!r} has no in-place form")
    _UNARY[op](x, out=x)
    return x


def atan2(y: ArrayLike, x: ArrayLike) -> np.ndarray:
    _check_broadcast(y, x)
    return np.arctan2(y, x)


def pow(x: ArrayLike, y: ArrayLike) -> np.ndarray:  # noqa: A001
    _check_broadcast(x, y)
    return np.power(np.asarray(x, dtype=float), y)


# Reductions -------------------------------------------------------------


def sum(x: ArrayLike) -> float:  # noqa: A001
    return float(np.sum(x))


def prod(x: ArrayLike) -> float:
    return float(np.prod(x))


def norm2_squared(x: ArrayLike) -> float:
    arr = np.asarray(x, dtype=float)
    return float(np.sum(arr * arr))


def norm2(x: ArrayLike) -> float:
    """Frobenius / Euclidean norm over all entries."""
    return float(np.sqrt(norm2_squared(x)))


def norminf(x: ArrayLike) -> float:
    arr = np.asarray(x, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.max(np.abs(arr)))


def norm1(x: ArrayLike) -> float:
    return float(np.sum(np.abs(np.asarray(x, dtype=float))))


def sup(x: ArrayLike) -> float:
    arr = np.asarray(x, dtype=float)
    if arr.size == 0:
        return -np.inf
    return float(np.max(arr))


def inf(x: ArrayLike) -> float:
    arr = np.asarray(x, dtype=float)
    if arr.size == 0:
        return np.inf
    return float(np.min(arr))


def all(x: ArrayLike) -> bool:  # noqa: A001
    return bool(np.all(x))


def any(x: ArrayLike) -> bool:  # noqa: A001
    return bool(np.any(x))


def same(x: ArrayLike, y: ArrayLike) -> bool:
    """Return True if ``x`` and ``y`` have equal shapes and entries."""
    a = np.asarray(x)
    b = np.asarray(y)
    return a.shape == b.shape and bool(np.all(a == b))


__all__ = [
    "Op",
    "UnaryOp",
    "binary",
    "binary_inplace",
    "unary",
    "unary_inplace",
    "atan2",
    "pow",
    "sum",
    "prod",
    "norm2",
    "norm2_squared",
    "norminf",
    "norm1",
    "sup",
    "inf",
    "all",
    "any",
    "same",
]
