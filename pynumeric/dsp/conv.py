"""Linear convolution through the power-of-two transform kernel."""

from typing import Optional

import numpy as np

from .fft import conv_pow2
from .utils import check_1d_array, next_pow2

_MODES = ("full", "same", "valid")


def _trim(full: np.ndarray, len_x: int, len_h: int, mode: str) -> np.ndarray:
    if mode == "full":
        return full
    if mode == "same":
        start = (min(len_x, len_h) - 1) // 2
        return full[start : start + max(len_x, len_h)]
    valid_len = max(len_x, len_h) - min(len_x, len_h) + 1
    start = min(len_x, len_h) - 1
    return full[start : start + valid_len]


def convolve(x: np.ndarray, h: np.ndarray, mode: str = "full") -> np.ndarray:
    """Direct convolution of two 1D arrays.

    Computes y[n] = sum_k x[k] * h[n-k] using the direct O(N*M) method.

    Args:
        x: First input signal (1D array).
        h: Second input signal (impulse response, 1D array).
        mode: Output mode: "full", "same", or "valid" (default: "full").

    Raises:
        ValueError: If mode is not one of the supported modes.
    """
    x = check_1d_array(x)
    h = check_1d_array(h)
    if mode not in _MODES:
        raise ValueError(f"Unsupported mode: {mode}")
    full = np.zeros(x.size + h.size - 1)
    for k, hk in enumerate(h):
        full[k : k + x.size] += hk * x
    return _trim(full, x.size, h.size, mode)


def fft_convolve(
    x: np.ndarray, h: np.ndarray, mode: str = "full", n_fft: Optional[int] = None
) -> np.ndarray:
    """FFT-based convolution using zero-padding.

    Both signals are padded to a power-of-two length and convolved
    circularly, which equals the linear convolution once the padding covers
    ``len(x) + len(h) - 1`` samples.

    Args:
        x: First input signal (1D array).
        h: Second input signal (impulse response, 1D array).
        mode: Output mode: "full", "same", or "valid" (default: "full").
        n_fft: FFT size (default: next power-of-two >= len(x) + len(h) - 1).

    Returns:
        Convolved signal (real-valued).
    """
    x = check_1d_array(x)
    h = check_1d_array(h)
    if mode not in _MODES:
        raise ValueError(f"Unsupported mode: {mode}")

    full_len = x.size + h.size - 1
    if n_fft is None:
        n_fft = next_pow2(full_len)
    elif n_fft < full_len or n_fft & (n_fft - 1):
        raise ValueError(f"n_fft must be a power of two >= {full_len}, got {n_fft}")

    a = np.zeros(n_fft)
    b = np.zeros(n_fft)
    a[: x.size] = x
    b[: h.size] = h
    zero = np.zeros(n_fft)
    re, _ = conv_pow2(a, zero, b, zero)
    return _trim(re[:full_len], x.size, h.size, mode)


__all__ = ["convolve", "fft_convolve"]
