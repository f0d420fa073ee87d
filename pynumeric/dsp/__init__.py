"""FFT and convolution.

Power-of-two lengths use an iterative radix-2 transform; other lengths go
through Bluestein's chirp-z identity on a zero-padded power-of-two
convolution.
"""

from .conv import convolve, fft_convolve
from .fft import conv_pow2, fft, fft_split, ifft, ifft_split
from .utils import check_1d_array, is_pow2, next_pow2

__all__ = [
    # Utils
    "check_1d_array",
    "is_pow2",
    "next_pow2",
    # Transforms
    "fft",
    "ifft",
    "fft_split",
    "ifft_split",
    "conv_pow2",
    # Convolution
    "convolve",
    "fft_convolve",
]
