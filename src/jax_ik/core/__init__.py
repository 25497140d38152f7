"""Core robot model data structures for JAX IK.

This module provides the fundamental data structures for representing
robots and points in a JAX-native, immutable format.
"""

from .point import Point3D
from .robot_model import RobotModel

__all__ = ["RobotModel", "Point3D"]
