"""Shape-carrying array construction and block access helpers.

Every public routine accepts nested sequences or ndarrays and validates
them into float ndarrays with an explicit shape. Ragged input is rejected
instead of being measured from its first element.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionError

Index = Union[int, Sequence[int]]


class RandomSource(Protocol):
    def random(self, size=None): ...


def _to_float_array(x) -> np.ndarray:
    if isinstance(x, np.ndarray):
        if x.dtype == object:
            raise DimensionError("Ragged or object arrays are not supported")
        return x.astype(float, copy=False)
    try:
        arr = np.array(x, dtype=float)
    except ValueError as exc:
        raise DimensionError(f"Input is not rectangular: {exc}") from exc
    return arr


def dim(x) -> Tuple[int, ...]:
    """Return the shape of ``x`` (empty tuple for scalars)."""
    return tuple(np.shape(_to_float_array(x)))


def as_vector(v, name: str = "v") -> np.ndarray:
    """Validate and cast input to a 1-D float array."""
    arr = _to_float_array(v)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise DimensionError(f"{name} must be a vector, got {arr.ndim}-D input")
    return arr


def as_matrix(A, name: str = "A", square: bool = False) -> np.ndarray:
    """Validate and cast input to a 2-D float array.

    Args:
        A: Nested sequence or ndarray.
        name: Name used in error messages.
        square: Require equal row and column counts.

    Raises:
        DimensionError: If the input is ragged, not 2-D, or not square when
            ``square`` is set.
    """
    arr = _to_float_array(A)
    if arr.ndim != 2:
        raise DimensionError(f"{name} must be a matrix, got {arr.ndim}-D input")
    if square and arr.shape[0] != arr.shape[1]:
        raise DimensionError(f"{name} must be square, got shape {arr.shape}")
    return arr


def rep(shape: Union[int, Sequence[int]], value: float = 0.0) -> np.ndarray:
    """Array of the given shape filled with ``value``."""
    return np.full(shape, float(value))


def identity(n: int) -> np.ndarray:
    return np.eye(int(n))


def diag(d) -> np.ndarray:
    """Square matrix with ``d`` on its diagonal."""
    return np.diag(as_vector(d, "d"))


def get_diag(A) -> np.ndarray:
    """Return the main diagonal of a matrix."""
    A = as_matrix(A)
    return np.diagonal(A).copy()


def linspace(a: float, b: float, n: Optional[int] = None) -> np.ndarray:
    """Evenly spaced points from ``a`` to ``b`` inclusive.

    When ``n`` is omitted it defaults to ``max(round(b - a) + 1, 1)``.
    ``n == 1`` yields ``[b]`` and ``n == 0`` yields an empty array.
    """
    if n is None:
        n = max(int(round(b - a)) + 1, 1)
    if n < 2:
        return np.array([float(b)]) if n == 1 else np.array([])
    return np.linspace(float(a), float(b), int(n))


def clone(x) -> np.ndarray:
    return np.array(x, dtype=float, copy=True)


def _corner_slices(shape, start: Sequence[int], stop: Sequence[int]):
    if len(start) != len(stop) or len(start) > len(shape):
        raise DimensionError("Block corners must match the array rank")
    slices = []
    for axis, (lo, hi) in enumerate(zip(start, stop)):
        if lo < 0 or hi >= shape[axis] or hi < lo - 1:
            raise DimensionError(
                f"Block [{lo}, {hi}] out of range for axis {axis} of length {shape[axis]}"
            )
        slices.append(slice(lo, hi + 1))
    return tuple(slices)


def get_block(x, start: Sequence[int], stop: Sequence[int]) -> np.ndarray:
    """Return the block with inclusive corners ``start`` and ``stop``."""
    arr = _to_float_array(x)
    return arr[_corner_slices(arr.shape, start, stop)].copy()


def set_block(x: np.ndarray, start: Sequence[int], stop: Sequence[int], block) -> np.ndarray:
    """Write ``block`` into ``x`` (in place) between inclusive corners."""
    x[_corner_slices(x.shape, start, stop)] = block
    return x


def get_range(A, rows: Index, cols: Index) -> np.ndarray:
    """Submatrix formed by the given row and column index lists."""
    A = as_matrix(A)
    return A[np.ix_(np.atleast_1d(rows), np.atleast_1d(cols))].copy()


def block_matrix(blocks) -> np.ndarray:
    """Assemble a matrix from a 2-D grid of matrix blocks."""
    grid = [[as_matrix(b, "block") for b in row] for row in blocks]
    for row in grid:
        heights = {b.shape[0] for b in row}
        if len(heights) != 1:
            raise DimensionError("Blocks in a row must share their row count")
    try:
        return np.block(grid)
    except ValueError as exc:
        raise DimensionError(str(exc)) from exc


def tensor(x, y) -> np.ndarray:
    """Outer product of two vectors."""
    return np.outer(as_vector(x, "x"), as_vector(y, "y"))


def transpose(A) -> np.ndarray:
    return as_matrix(A).T.copy()


def random(shape: Union[int, Sequence[int]], rng: RandomSource) -> np.ndarray:  # noqa: A001
    """Uniform samples in [0, 1) drawn from an explicit random source.

    Args:
        shape: Output shape.
        rng: Any object exposing ``random(size)``, such as
            :class:`pynumeric.prng.ARC4Random` or ``numpy.random.Generator``.
    """
    return np.asarray(rng.random(shape), dtype=float)


__all__ = [
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
]
