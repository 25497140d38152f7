"""Mutable evaluation state for forward kinematics.

A ``KinematicState`` holds one configuration and the world transform of
every link for one scalar backend. States are cheap to refill but not to
build (constants are converted into the backend once), so evaluators keep
them in a ``StateCache`` keyed by scalar type.

A state must only be filled by one evaluation at a time. The robot model is
immutable and can be shared; states cannot.
"""

import logging
from typing import Dict, Hashable, Iterator, List, Sequence

import numpy as np

from .backends import ScalarBackend
from .core import RobotModel
from .errors import ConfigurationLengthError
from .transforms import se3

logger = logging.getLogger(__name__)


class KinematicState:
    """Configuration plus propagated link transforms for one scalar backend."""

    def __init__(self, robot: RobotModel, backend: ScalarBackend):
        self.robot = robot
        self.backend = backend
        self._parents: List[int] = np.asarray(robot.parent_indices).tolist()
        self._origins = [backend.constant(T) for T in np.asarray(robot.joint_transforms)]
        self._axes = np.asarray(robot.joint_axes)
        self._dof_of_link: Dict[int, int] = {
            link: dof for dof, link in enumerate(robot.actuated_link_indices)
        }
        self._identity = backend.constant(np.eye(4))
        self.configuration: list = [None] * robot.num_dof
        self.world_transforms: list = [None] * robot.num_links

    def set_configuration(self, configuration: Sequence) -> None:
        """Store a configuration and propagate transforms from the root.

        Raises:
            ConfigurationLengthError: if the configuration does not have one
                entry per degree of freedom.
        """
        if len(configuration) != self.robot.num_dof:
            raise ConfigurationLengthError(self.robot.num_dof, len(configuration))
        self.configuration = [configuration[i] for i in range(self.robot.num_dof)]
        self._propagate()

    def _propagate(self) -> None:
        backend = self.backend
        self.world_transforms[0] = self._identity
        # Links are stored breadth-first, parents are always filled first
        for i in range(1, self.robot.num_links):
            T = se3.multiply(self.world_transforms[self._parents[i]], self._origins[i], backend)
            dof = self._dof_of_link.get(i)
            if dof is not None:
                motion = se3.joint_motion(self._axes[i], self.configuration[dof], backend)
                T = se3.multiply(T, motion, backend)
            self.world_transforms[i] = T

    def transform(self, link_index: int):
        """World pose of a link as a 4x4 matrix in the backend's array type."""
        return self.world_transforms[link_index]

    def point_in_frame(self, coordinates: Sequence[float], source_index: int, frame_index: int) -> list:
        """Express a point fixed on link ``source_index`` in frame ``frame_index``."""
        point = self.backend.constant(np.asarray(coordinates, dtype=float))
        world = se3.apply(self.transform(source_index), point, self.backend)
        if frame_index == 0:
            return world
        return se3.apply_inverse(self.transform(frame_index), world, self.backend)


class StateCache:
    """Lazily created ``KinematicState`` objects, one per scalar type."""

    def __init__(self, robot: RobotModel):
        self.robot = robot
        self._states: Dict[Hashable, KinematicState] = {}

    def get(self, key: Hashable, backend: ScalarBackend) -> KinematicState:
        state = self._states.get(key)
        if state is None:
            logger.debug("Creating kinematic state for scalar type %s (%s backend)", key, backend.name)
            state = KinematicState(self.robot, backend)
            self._states[key] = state
        return state

    def __contains__(self, key: Hashable) -> bool:
        return key in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._states)
