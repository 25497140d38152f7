"""Drivers that minimise residual functions.

- ``solve_local``: gradient-based local search (SciPy, JAX gradients)
- ``solve_global``: interval branch-and-bound with a guaranteed enclosure
  of the global minimum (mpmath interval arithmetic)
"""

from .interval import GlobalResult, solve_global
from .local import LocalResult, solve_local

__all__ = ["solve_local", "LocalResult", "solve_global", "GlobalResult"]
