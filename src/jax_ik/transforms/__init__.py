"""
Rigid-body transform helpers for robot kinematics.

This module provides:
- SO(3) rotations (so3 module)
- SE(3) homogeneous transforms (se3 module)

Functions that depend on joint positions take a scalar backend, so they work
for floats, JAX tracers, SymPy expressions and intervals alike.
"""

from . import so3
from . import se3

__all__ = [
    "so3",
    "se3",
]
