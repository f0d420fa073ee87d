"""Adaptive ODE integration."""

from .dopri import DopriResult, dopri

__all__ = ["DopriResult", "dopri"]
