"""Global numerical tolerance for pynumeric."""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_EPSILON_ENV_VAR = "PYNUMERIC_EPSILON"
_DEFAULT_EPSILON = 2.220446049250313e-16


def _read_env_epsilon() -> float:
    raw = os.getenv(_EPSILON_ENV_VAR)
    if raw is None:
        return _DEFAULT_EPSILON
    value = float(raw)
    if not value > 0:
        raise ValueError(f"{_EPSILON_ENV_VAR} must be positive, got {raw!r}")
    return value


_epsilon: float = _read_env_epsilon()


def get_epsilon() -> float:
    """
    Return the machine tolerance used by deflation and default tolerances.

    The value can be changed with set_epsilon(...) or the
    PYNUMERIC_EPSILON environment variable.

    Returns
    -------
    float
        Current tolerance.
    """
    return _epsilon


def set_epsilon(value: float) -> None:
    """
    Globally set the machine tolerance.

    Parameters
    ----------
    value:
        Strictly positive tolerance.
    """
    global _epsilon
    value = float(value)
    if not value > 0:
        raise ValueError("epsilon must be positive")
    _epsilon = value


@contextmanager
def epsilon_context(value: float) -> Iterator[None]:
    """
    Context manager to temporarily override the machine tolerance.

    Example
    -------
    >>> with epsilon_context(1e-12):
    ...     pass
    """
    prev = _epsilon
    set_epsilon(value)
    try:
        yield
    finally:
        set_epsilon(prev)


__all__ = ["get_epsilon", "set_epsilon", "epsilon_context"]
