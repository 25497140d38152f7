"""Forward kinematics for whole robots.

Thin wrappers over ``KinematicState`` that return the pose of every link or
the world position of a point for one configuration. They accept the same
scalar types as the residual functions.
"""

from typing import Dict, Sequence

import numpy as np

from . import backends
from .core import Point3D, RobotModel
from .state import KinematicState


def _filled_state(robot: RobotModel, q: Sequence) -> KinematicState:
    _, backend = backends.resolve(q)
    state = KinematicState(robot, backend)
    state.set_configuration(q)
    return state


def forward_kinematics(robot: RobotModel, q: Sequence) -> Dict[str, object]:
    """Compute forward kinematics for all links in the robot.

    Args:
        robot: RobotModel containing the robot's kinematic structure
        q: Joint positions of shape (num_dof,) for actuated joints only

    Returns:
        Dictionary mapping link names to their 4x4 SE(3) world poses
    """
    state = _filled_state(robot, q)
    return {name: state.transform(i) for i, name in enumerate(robot.link_names)}


def link_positions(robot: RobotModel, q: Sequence) -> np.ndarray:
    """World positions of every link origin as a (num_links, 3) float array."""
    state = _filled_state(robot, q)
    return np.array([np.asarray(state.transform(i), dtype=float)[:3, 3]
                     for i in range(robot.num_links)])


def point_position(robot: RobotModel, q: Sequence, point: Point3D) -> list:
    """World coordinates of ``point`` at configuration ``q``."""
    state = _filled_state(robot, q)
    return state.point_in_frame(point.coordinates, robot.link_index(point.frame), 0)
