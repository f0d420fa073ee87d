"""Discrete Fourier transforms on split real/imaginary arrays.

Power-of-two lengths use an iterative radix-2 Cooley-Tukey transform.
Other lengths use Bluestein's chirp-z identity, which rewrites the DFT as a
circular convolution evaluated with power-of-two transforms of length at
least ``2n - 1``.

The forward transform is unscaled; the inverse divides by ``n``.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from ..core.arrays import as_vector
from ..core.tensor import Tensor
from ..exceptions import DimensionError
from .utils import bit_reverse_indices, is_pow2, next_pow2

Split = Tuple[np.ndarray, np.ndarray]


def _fft_pow2(re: np.ndarray, im: np.ndarray, inverse: bool = False) -> Split:
    n = re.size
    if n <= 1:
        return re.copy(), im.copy()
    rev = bit_reverse_indices(n)
    re = re[rev]
    im = im[rev]
    sign = 1.0 if inverse else -1.0
    size = 2
    while size <= n:
        half = size // 2
        angle = sign * 2.0 * np.pi * np.arange(half) / size
        wr = np.cos(angle)
        wi = np.sin(angle)
        blocks_re = re.reshape(-1, size)
        blocks_im = im.reshape(-1, size)
        er, ei = blocks_re[:, :half], blocks_im[:, :half]
        odd_r, odd_i = blocks_re[:, half:], blocks_im[:, half:]
        tr = wr * odd_r - wi * odd_i
        ti = wr * odd_i + wi * odd_r
        re = np.concatenate([er + tr, er - tr], axis=1).reshape(-1)
        im = np.concatenate([ei + ti, ei - ti], axis=1).reshape(-1)
        size *= 2
    return re, im


def conv_pow2(ar, ai, br, bi) -> Split:
    """Circular convolution of two complex sequences of equal power-of-two length."""
    ar, ai, br, bi = (np.asarray(v, dtype=float) for v in (ar, ai, br, bi))
    n = ar.size
    if not is_pow2(n) or any(v.size != n for v in (ai, br, bi)):
        raise DimensionError("conv_pow2 needs equal power-of-two lengths")
    xr, xi = _fft_pow2(ar, ai)
    yr, yi = _fft_pow2(br, bi)
    zr, zi = _fft_pow2(xr * yr - xi * yi, xr * yi + xi * yr, inverse=True)
    return zr / n, zi / n


def _bluestein(re: np.ndarray, im: np.ndarray) -> Split:
    n = re.size
    m = next_pow2(2 * n - 1)
    k = np.arange(n)
    # Chirp w_k = exp(-i pi k^2 / n); k^2 is reduced mod 2n to keep the angle small.
    angle = -np.pi * ((k * k) % (2 * n)) / n
    wr, wi = np.cos(angle), np.sin(angle)
    ar = np.zeros(m)
    ai = np.zeros(m)
    ar[:n] = re * wr - im * wi
    ai[:n] = re * wi + im * wr
    br = np.zeros(m)
    bi = np.zeros(m)
    br[:n] = wr
    bi[:n] = -wi
    br[m - n + 1 :] = wr[1:][::-1]
    bi[m - n + 1 :] = -wi[1:][::-1]
    cr, ci = conv_pow2(ar, ai, br, bi)
    cr, ci = cr[:n], ci[:n]
    return cr * wr - ci * wi, cr * wi + ci * wr


def fft_split(re, im: Optional[np.ndarray] = None) -> Split:
    """Forward DFT of a 1-D sequence given as real and imaginary parts."""
    re = as_vector(re, "re")
    im = np.zeros_like(re) if im is None else as_vector(im, "im")
    if im.size != re.size:
        raise DimensionError("Real and imaginary parts must have equal length")
    if re.size == 0:
        return re.copy(), im.copy()
    if is_pow2(re.size):
        return _fft_pow2(re, im)
    return _bluestein(re, im)


def ifft_split(re, im: Optional[np.ndarray] = None) -> Split:
    """Inverse DFT (scaled by ``1/n``) via the conjugation identity."""
    re = as_vector(re, "re")
    im = np.zeros_like(re) if im is None else as_vector(im, "im")
    n = re.size
    if n == 0:
        return re.copy(), im.copy()
    out_re, out_im = fft_split(re, -im)
    return out_re / n, -out_im / n


def _as_tensor(x) -> Tensor:
    return x if isinstance(x, Tensor) else Tensor.from_complex(np.asarray(x))


def fft(x) -> Tensor:
    """Forward DFT along the last axis of a Tensor, real or complex array."""
    return _as_tensor(x).fft()


def ifft(x) -> Tensor:
    """Inverse DFT along the last axis of a Tensor, real or complex array."""
    return _as_tensor(x).ifft()


__all__ = ["conv_pow2", "fft_split", "ifft_split", "fft", "ifft"]
