"""3D rendering of robot configurations with matplotlib."""

from typing import Iterable, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from mpl_toolkits.mplot3d import Axes3D  # noqa: F401  registers the 3d projection

from .chain import link_positions, point_position
from .core import Point3D, RobotModel


def plot_configuration(
    robot: RobotModel,
    q: Sequence[float],
    points: Iterable[Point3D] = (),
    ax=None,
    color: str = "tab:blue",
    point_color: str = "tab:red",
):
    """Draw the kinematic tree at configuration ``q``.

    Each link is drawn as a segment from its parent's origin to its own
    origin; ``points`` are drawn as markers at their world positions.

    Args:
        robot: the mechanism
        q: configuration (floats)
        points: points to mark, e.g. the end-effector point and the target
        ax: existing 3D axes to draw into; a new figure is created if None

    Returns:
        The matplotlib 3D axes.
    """
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(projection="3d")

    positions = link_positions(robot, q)
    parents = np.asarray(robot.parent_indices).tolist()
    for i, parent in enumerate(parents):
        if i == parent:
            continue
        segment = np.stack([positions[parent], positions[i]])
        ax.plot(segment[:, 0], segment[:, 1], segment[:, 2], color=color, marker="o", markersize=3)

    for point in points:
        xyz = np.asarray(point_position(robot, q, point), dtype=float)
        ax.scatter([xyz[0]], [xyz[1]], [xyz[2]], color=point_color, s=30)

    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")
    ax.set_zlabel("z [m]")
    return ax
