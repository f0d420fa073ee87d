"""Tests for direct and FFT-based convolution."""

import numpy as np
import pytest

from pynumeric.dsp import convolve, fft_convolve, next_pow2


@pytest.mark.parametrize("mode", ["full", "same", "valid"])
def test_convolutions_match_numpy(rng, mode):
    x = rng.standard_normal(20)
    h = rng.standard_normal(5)
    expected = np.convolve(x, h, mode=mode)
    np.testing.assert_allclose(convolve(x, h, mode), expected, atol=1e-12)
    np.testing.assert_allclose(fft_convolve(x, h, mode), expected, atol=1e-10)


def test_fft_convolve_explicit_size(rng):
    x = rng.standard_normal(5)
    h = rng.standard_normal(4)
    np.testing.assert_allclose(fft_convolve(x, h, n_fft=16), np.convolve(x, h), atol=1e-10)
    with pytest.raises(ValueError):
        fft_convolve(x, h, n_fft=4)
    with pytest.raises(ValueError):
        fft_convolve(x, h, n_fft=12)


def test_invalid_mode_and_input():
    with pytest.raises(ValueError):
        convolve([1.0], [1.0], mode="circular")
    with pytest.raises(ValueError):
        convolve([1.0, np.nan], [1.0])


def test_next_pow2():
    assert next_pow2(0) == 1
    assert next_pow2(8) == 8
    assert next_pow2(9) == 16
