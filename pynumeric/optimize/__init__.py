"""Unconstrained minimization.

Example
-------
>>> import numpy as np
>>> from pynumeric.optimize import uncmin
>>> def rosen(x):
...     return (1 - x[0])**2 + 100 * (x[1] - x[0]**2)**2
>>> res = uncmin(rosen, np.array([-1.2, 1.0]))
>>> bool(np.allclose(res.x, [1.0, 1.0], atol=1e-4))
True
"""

from .core import OptimizeResult
from .gradient import gradient
from .line_search import LineSearchResult, backtracking_armijo
from .uncmin import uncmin

__all__ = [
    "OptimizeResult",
    "LineSearchResult",
    "gradient",
    "backtracking_armijo",
    "uncmin",
]
