"""Point-to-target distance as a function of the joint configuration.

This module implements the cost minimised by the inverse kinematics
solvers. ``evaluate`` binds a robot, a point on one of its bodies and a
target point, and returns a callable mapping configurations to the
Euclidean distance between the two points.

The callable only uses ``+``, ``-``, ``*``, integer powers, ``sin``, ``cos``
and ``sqrt`` on the configuration entries, so the same object can be handed
to a local optimiser (floats, JAX tracers for gradients), to the interval
branch-and-bound solver (mpmath intervals) and to SymPy (symbols).
"""

from typing import Sequence

from . import backends
from .core import Point3D, RobotModel
from .errors import ConfigurationLengthError, UnsupportedScalarTypeError
from .state import StateCache


class Residual:
    """Distance between a body point and a target, as a function of ``q``.

    Attributes:
        robot: the mechanism
        point_on_body: source point, usually on the end-effector link
        target: target point, fixed in the world or attached to a link
        states: per-scalar-type evaluation states owned by this residual
    """

    def __init__(self, robot: RobotModel, point_on_body: Point3D, target: Point3D):
        self.robot = robot
        self.point_on_body = point_on_body
        self.target = target
        self._source_index = robot.link_index(point_on_body.frame)
        self._target_index = robot.link_index(target.frame)
        self.states = StateCache(robot)

    @property
    def num_dof(self) -> int:
        return self.robot.num_dof

    def __call__(self, configuration: Sequence):
        """Residual at ``configuration``.

        Args:
            configuration: one scalar per degree of freedom, in the order of
                ``robot.joint_names``

        Returns:
            Scalar of the configuration's type, >= 0.

        Raises:
            ConfigurationLengthError: wrong number of entries.
            UnsupportedScalarTypeError: the scalars lack an operation
                forward kinematics needs.
        """
        if len(configuration) != self.robot.num_dof:
            raise ConfigurationLengthError(self.robot.num_dof, len(configuration))
        key, backend = backends.resolve(configuration)
        state = self.states.get(key, backend)
        try:
            state.set_configuration(configuration)
            p = state.point_in_frame(self.point_on_body.coordinates, self._source_index, self._target_index)
            d = [p[i] - self.target.coordinates[i] for i in range(3)]
            return backend.sqrt(d[0] ** 2 + d[1] ** 2 + d[2] ** 2)
        except (TypeError, AttributeError) as e:
            raise UnsupportedScalarTypeError(
                f"Scalars of type {key!r} do not support the operations forward kinematics needs: {e}"
            ) from e

    def __repr__(self):
        return (f"Residual(point_on_body={self.point_on_body!r}, target={self.target!r}, "
                f"num_dof={self.num_dof})")


def evaluate(robot: RobotModel, point_on_body: Point3D, target: Point3D) -> Residual:
    """Build the residual function for reaching ``target`` with ``point_on_body``.

    Frames are checked here, so a bad link name fails before any optimiser
    starts calling the residual.

    Raises:
        FrameMismatchError: if either point refers to a link not in ``robot``.
    """
    return Residual(robot, point_on_body, target)
