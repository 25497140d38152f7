"""
JAX IK: point-reaching inverse kinematics for robot arms.

A residual function (distance from a point on a robot body to a target) is
built once from a URDF model and then evaluated with floats, JAX tracers
(gradients), SymPy symbols (closed-form expressions) or mpmath intervals
(guaranteed global bounds).
"""

import logging

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import transforms
from . import core
from . import io
from .core import Point3D, RobotModel
from .errors import (
    ConfigurationLengthError,
    FrameMismatchError,
    KinematicsError,
    UnsupportedScalarTypeError,
    URDFParseError,
)
from .residual import Residual, evaluate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "io",
    "RobotModel",
    "Point3D",
    "Residual",
    "evaluate",
    "KinematicsError",
    "ConfigurationLengthError",
    "FrameMismatchError",
    "UnsupportedScalarTypeError",
    "URDFParseError",
]
