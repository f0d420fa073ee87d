"""Seedable ARC4-based pseudo-random number generator.

:class:`ARC4Random` produces uniform doubles in ``[0, 1)`` with 52 random
mantissa bits from an RC4 keystream (the first 256 bytes are discarded).
The key is derived from an arbitrary seed value by a byte-smearing mix, so
equal seeds give equal streams across processes and platforms.

Each instance owns its stream state; there is no module-level generator.
Any object exposing ``random(size)`` can be passed where the library needs
randomness, e.g. :func:`pynumeric.core.arrays.random`.

Example:
    >>> from pynumeric.prng import ARC4Random
    >>> rng = ARC4Random("hello.")
    >>> rng.random()
    0.9282578795792454
"""

from __future__ import annotations

import os
import time
from typing import List, Optional, Sequence, Union

import numpy as np

WIDTH = 256
CHUNKS = 6
DIGITS = 52
_MASK = WIDTH - 1
_STARTDENOM = float(WIDTH**CHUNKS)
_SIGNIFICANCE = float(2**DIGITS)
_OVERFLOW = _SIGNIFICANCE * 2
_FLATTEN_DEPTH = 3


class _ARC4:
    """RC4 keystream generator with the first ``WIDTH`` bytes dropped."""

    __slots__ = ("i", "j", "S")

    def __init__(self, key: List[int]) -> None:
        if not key:
            key = [0]
        keylen = len(key)
        s = list(range(WIDTH))
        j = 0
        for i in range(WIDTH):
            t = s[i]
            j = _MASK & (j + key[i % keylen] + t)
            s[i] = s[j]
            s[j] = t
        self.S = s
        self.i = 0
        self.j = 0
        self.g(WIDTH)

    def g(self, count: int) -> int:
        """Next ``count`` keystream bytes as a big-endian integer."""
        s = self.S
        i, j = self.i, self.j
        r = 0
        for _ in range(count):
            i = _MASK & (i + 1)
            t = s[i]
            j = _MASK & (j + t)
            s[i] = s[j]
            s[j] = t
            r = r * WIDTH + s[_MASK & (s[i] + t)]
        self.i, self.j = i, j
        return r


def _scalar_text(value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flatten(value, depth: int):
    if depth and isinstance(value, dict):
        return [_flatten(v, depth - 1) for v in value.values()] or _scalar_text(value) + "\0"
    if depth and isinstance(value, (list, tuple)):
        return [_flatten(v, depth - 1) for v in value] or "\0"
    if isinstance(value, (list, tuple)):
        return ",".join(_scalar_text(v) for v in value)
    if isinstance(value, str):
        return value
    return _scalar_text(value) + "\0"


def _joined(flat) -> str:
    if isinstance(flat, list):
        return ",".join(_joined(item) for item in flat)
    return flat


def _mixkey(seed: str, key: List[int]) -> List[int]:
    smear = 0
    for j, ch in enumerate(seed):
        slot = _MASK & j
        while len(key) <= slot:
            key.append(0)
        smear ^= key[slot] * 19
        key[slot] = _MASK & (smear + ord(ch))
    return key


def _entropy_text() -> str:
    return os.urandom(WIDTH).decode("latin-1") + str(time.time_ns())


class ARC4Random:
    """
    Caller-owned ARC4 random stream.

    Args:
        seed: Any string, number, or (nested) list/dict of them. ``None``
            seeds from operating-system entropy.
        entropy: Mix fresh operating-system entropy into the given seed.
    """

    def __init__(self, seed=None, entropy: bool = False) -> None:
        self._arc4: Optional[_ARC4] = None
        self.seed(seed, entropy=entropy)

    def seed(self, value=None, entropy: bool = False) -> str:
        """Reseed the stream and return the derived key as a string."""
        if value is None:
            material = _entropy_text()
        elif entropy:
            material = _joined(_flatten([value, _entropy_text()], _FLATTEN_DEPTH))
        else:
            material = _joined(_flatten(value, _FLATTEN_DEPTH))
        key = _mixkey(material, [])
        self._arc4 = _ARC4(key)
        return "".join(chr(k) for k in key)

    def _next(self) -> float:
        arc4 = self._arc4
        n = float(arc4.g(CHUNKS))
        d = _STARTDENOM
        x = 0
        while n < _SIGNIFICANCE:
            n = (n + x) * WIDTH
            d *= WIDTH
            x = arc4.g(1)
        while n >= _OVERFLOW:
            n /= 2
            d /= 2
            x >>= 1
        return (n + x) / d

    def random(self, size: Union[None, int, Sequence[int]] = None):
        """
        Uniform sample(s) in ``[0, 1)``.

        Returns a float when ``size`` is None, otherwise an array of that
        shape filled in C order.
        """
        if size is None:
            return self._next()
        shape = (size,) if isinstance(size, (int, np.integer)) else tuple(size)
        count = int(np.prod(shape)) if shape else 1
        return np.array([self._next() for _ in range(count)]).reshape(shape)


__all__ = ["ARC4Random", "WIDTH", "CHUNKS", "DIGITS"]
