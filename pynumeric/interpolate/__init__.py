"""Piecewise-cubic Hermite splines."""

from .spline import Spline, spline

__all__ = ["Spline", "spline"]
