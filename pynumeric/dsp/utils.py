"""Utility functions for the transform routines.

Provides input validation and power-of-two helpers.
"""

import numpy as np


def check_1d_array(x) -> np.ndarray:
    """Validate and cast input to 1D float64 array.

    Args:
        x: Input array-like object.

    Returns:
        1D float64 numpy array.

    Raises:
        ValueError: If input is not 1D, contains NaN, or contains Inf.
    """
    arr = np.asarray(x, dtype=float)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    elif arr.ndim > 1:
        raise ValueError(f"Expected 1D array, got {arr.ndim}D array")
    if np.any(np.isnan(arr)):
        raise ValueError("Input contains NaN values")
    if np.any(np.isinf(arr)):
        raise ValueError("Input contains Inf values")
    return arr


def is_pow2(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def next_pow2(n: int) -> int:
    """Return the next power-of-two >= n.

    Args:
        n: Positive integer.

    Returns:
        Smallest power-of-two >= n. Returns 1 if n <= 0.
    """
    if n <= 0:
        return 1
    if is_pow2(n):
        return n
    return 1 << (n - 1).bit_length()


def bit_reverse_indices(n: int) -> np.ndarray:
    """Permutation putting a length-``n`` (power of two) array in bit-reversed order."""
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=int)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


__all__ = ["check_1d_array", "is_pow2", "next_pow2", "bit_reverse_indices"]
