"""Complex tensor stored as separate real and imaginary float arrays.

Both parts are always present; a purely real value carries a zero-filled
imaginary array of the same shape. Binary operations accept another
``Tensor``, a real or complex ndarray, or a scalar on either side.

The ``set*`` methods mutate the receiver and return it.
"""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionError

Operand = Union["Tensor", np.ndarray, float, complex, int]


def _split(value: Operand) -> Tuple[np.ndarray, np.ndarray]:
    if isinstance(value, Tensor):
        return value.re, value.im
    arr = np.asarray(value)
    if np.iscomplexobj(arr):
        return arr.real.astype(float), arr.imag.astype(float)
    arr = arr.astype(float)
    return arr, np.zeros_like(arr)


def _check_shapes(a: np.ndarray, b: np.ndarray) -> None:
    try:
        np.broadcast_shapes(a.shape, b.shape)
    except ValueError as exc:
        raise DimensionError(f"Shapes {a.shape} and {b.shape} do not broadcast") from exc


class Tensor:
    """Complex array with explicit real and imaginary parts.

    Args:
        re: Real part (scalar, nested sequence or ndarray).
        im: Imaginary part with the same shape as ``re``. Defaults to zeros.
    """

    __slots__ = ("re", "im")

    def __init__(self, re, im=None):
        self.re = np.array(re, dtype=float)
        if im is None:
            self.im = np.zeros_like(self.re)
        else:
            self.im = np.array(im, dtype=float)
            if self.im.shape != self.re.shape:
                raise DimensionError(
                    f"Real part {self.re.shape} and imaginary part {self.im.shape} differ"
                )

    # Construction and interop ---------------------------------------------

    @classmethod
    def from_complex(cls, z) -> "Tensor":
        z = np.asarray(z)
        return cls(z.real, z.imag)

    def to_complex(self) -> np.ndarray:
        return self.re + 1j * self.im

    @classmethod
    def identity(cls, n: int) -> "Tensor":
        return cls(np.eye(n))

    @classmethod
    def rep(cls, shape, value: complex = 0.0) -> "Tensor":
        value = complex(value)
        return cls(np.full(shape, value.real), np.full(shape, value.imag))

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.re.shape

    @property
    def ndim(self) -> int:
        return self.re.ndim

    def copy(self) -> "Tensor":
        return Tensor(self.re.copy(), self.im.copy())

    def is_real(self, tol: float = 0.0) -> bool:
        """Return True when every imaginary entry is within ``tol`` of zero."""
        return bool(np.all(np.abs(self.im) <= tol))

    def __repr__(self) -> str:
        return f"Tensor(re={self.re!r}, im={self.im!r})"

    # Arithmetic ------------------------------------------------------------

    def add(self, other: Operand) -> "Tensor":
        ore, oim = _split(other)
        _check_shapes(self.re, ore)
        return Tensor(self.re + ore, self.im + oim)

    def sub(self, other: Operand) -> "Tensor":
        ore, oim = _split(other)
        _check_shapes(self.re, ore)
        return Tensor(self.re - ore, self.im - oim)

    def mul(self, other: Operand) -> "Tensor":
        ore, oim = _split(other)
        _check_shapes(self.re, ore)
        return Tensor(
            self.re * ore - self.im * oim,
            self.re * oim + self.im * ore,
        )

    def div(self, other: Operand) -> "Tensor":
        ore, oim = _split(other)
        _check_shapes(self.re, ore)
        denom = ore * ore + oim * oim
        with np.errstate(divide="ignore", invalid="ignore"):
            return Tensor(
                (self.re * ore + self.im * oim) / denom,
                (self.im * ore - self.re * oim) / denom,
            )

    def dot(self, other: Operand) -> "Tensor":
        """Complex matrix/vector product following ``numpy.dot`` rules."""
        ore, oim = _split(other)
        try:
            re = np.dot(self.re, ore) - np.dot(self.im, oim)
            im = np.dot(self.re, oim) + np.dot(self.im, ore)
        except ValueError as exc:
            raise DimensionError(str(exc)) from exc
        return Tensor(re, im)

    def neg(self) -> "Tensor":
        return Tensor(-self.re, -self.im)

    def conj(self) -> "Tensor":
        return Tensor(self.re.copy(), -self.im)

    def reciprocal(self) -> "Tensor":
        denom = self.re * self.re + self.im * self.im
        with np.errstate(divide="ignore", invalid="ignore"):
            return Tensor(self.re / denom, -self.im / denom)

    def exp(self) -> "Tensor":
        mag = np.exp(self.re)
        return Tensor(mag * np.cos(self.im), mag * np.sin(self.im))

    def log(self) -> "Tensor":
        with np.errstate(divide="ignore"):
            return Tensor(np.log(np.hypot(self.re, self.im)), np.arctan2(self.im, self.re))

    def abs(self) -> "Tensor":
        return Tensor(np.hypot(self.re, self.im))

    def norm2(self) -> float:
        return float(np.sqrt(np.sum(self.re * self.re + self.im * self.im)))

    def transpose(self) -> "Tensor":
        return Tensor(self.re.T.copy(), self.im.T.copy())

    def transjugate(self) -> "Tensor":
        return Tensor(self.re.T.copy(), -self.im.T)

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __neg__ = neg
    __matmul__ = dot

    def __radd__(self, other: Operand) -> "Tensor":
        return self.add(other)

    def __rmul__(self, other: Operand) -> "Tensor":
        return self.mul(other)

    def __rsub__(self, other: Operand) -> "Tensor":
        return self.neg().add(other)

    def __rtruediv__(self, other: Operand) -> "Tensor":
        return self.reciprocal().mul(other)

    # Indexing ---------------------------------------------------------------

    def get(self, index) -> "Tensor":
        index = tuple(index) if isinstance(index, (list, tuple)) else index
        return Tensor(self.re[index], self.im[index])

    def set(self, index, value: Operand) -> "Tensor":
        index = tuple(index) if isinstance(index, (list, tuple)) else index
        vre, vim = _split(value)
        self.re[index] = vre
        self.im[index] = vim
        return self

    def get_row(self, i: int) -> "Tensor":
        return Tensor(self.re[i].copy(), self.im[i].copy())

    def set_row(self, i: int, row: Operand) -> "Tensor":
        rre, rim = _split(row)
        self.re[i] = rre
        self.im[i] = rim
        return self

    def get_rows(self, i0: int, i1: int) -> "Tensor":
        """Rows ``i0`` through ``i1`` inclusive."""
        return Tensor(self.re[i0 : i1 + 1].copy(), self.im[i0 : i1 + 1].copy())

    def set_rows(self, i0: int, i1: int, rows: Operand) -> "Tensor":
        rre, rim = _split(rows)
        self.re[i0 : i1 + 1] = rre
        self.im[i0 : i1 + 1] = rim
        return self

    def _block(self, start: Sequence[int], stop: Sequence[int]):
        if len(start) != len(stop) or len(start) > self.ndim:
            raise DimensionError("Block corners must match the tensor rank")
        return tuple(slice(lo, hi + 1) for lo, hi in zip(start, stop))

    def get_block(self, start: Sequence[int], stop: Sequence[int]) -> "Tensor":
        """Block with inclusive corners ``start`` and ``stop``."""
        sl = self._block(start, stop)
        return Tensor(self.re[sl].copy(), self.im[sl].copy())

    def set_block(self, start: Sequence[int], stop: Sequence[int], block: Operand) -> "Tensor":
        sl = self._block(start, stop)
        bre, bim = _split(block)
        self.re[sl] = bre
        self.im[sl] = bim
        return self

    def get_diag(self) -> "Tensor":
        if self.ndim != 2:
            raise DimensionError("get_diag requires a matrix")
        return Tensor(np.diagonal(self.re).copy(), np.diagonal(self.im).copy())

    def diag(self) -> "Tensor":
        """Square matrix with this vector on the diagonal."""
        if self.ndim != 1:
            raise DimensionError("diag requires a vector")
        return Tensor(np.diag(self.re), np.diag(self.im))

    # Linear algebra ---------------------------------------------------------

    def inv(self) -> "Tensor":
        """Complex inverse by Gauss-Jordan elimination with partial pivoting."""
        if self.ndim != 2 or self.shape[0] != self.shape[1]:
            raise DimensionError(f"inv requires a square matrix, got {self.shape}")
        n = self.shape[0]
        are, aim = self.re.copy(), self.im.copy()
        ire, iim = np.eye(n), np.zeros((n, n))
        for j in range(n):
            mag = are[j:, j] ** 2 + aim[j:, j] ** 2
            p = j + int(np.argmax(mag))
            if p != j:
                for m in (are, aim, ire, iim):
                    m[[j, p]] = m[[p, j]]
            pr, pi = are[j, j], aim[j, j]
            denom = pr * pr + pi * pi
            with np.errstate(divide="ignore", invalid="ignore"):
                qr, qi = pr / denom, -pi / denom
            for rre, rim in ((are, aim), (ire, iim)):
                row_re = rre[j] * qr - rim[j] * qi
                row_im = rre[j] * qi + rim[j] * qr
                rre[j], rim[j] = row_re, row_im
            for i in range(n):
                if i == j:
                    continue
                fr, fi = are[i, j], aim[i, j]
                if fr == 0.0 and fi == 0.0:
                    continue
                for rre, rim in ((are, aim), (ire, iim)):
                    rre[i] -= fr * rre[j] - fi * rim[j]
                    rim[i] -= fr * rim[j] + fi * rre[j]
        return Tensor(ire, iim)

    def fft(self) -> "Tensor":
        """Discrete Fourier transform along the last axis."""
        from ..dsp.fft import fft_split

        return self._along_last_axis(fft_split)

    def ifft(self) -> "Tensor":
        """Inverse discrete Fourier transform along the last axis."""
        from ..dsp.fft import ifft_split

        return self._along_last_axis(ifft_split)

    def _along_last_axis(self, transform) -> "Tensor":
        if self.ndim == 0:
            raise DimensionError("FFT requires at least one axis")
        n = self.shape[-1]
        re = self.re.reshape(-1, n)
        im = self.im.reshape(-1, n)
        out_re = np.empty_like(re)
        out_im = np.empty_like(im)
        for k in range(re.shape[0]):
            out_re[k], out_im[k] = transform(re[k], im[k])
        return Tensor(out_re.reshape(self.shape), out_im.reshape(self.shape))


__all__ = ["Tensor"]
