"""RobotModel PyTree data structure for JAX-native robot representation.

This module defines the core data structure for representing robots in a
stateless, immutable format that is fully compatible with JAX transformations.
"""

from typing import Tuple

from flax import struct
from jax import Array

from ..errors import FrameMismatchError


@struct.dataclass
class RobotModel:
    """Immutable PyTree representation of a robot's kinematic structure.

    This dataclass represents a robot as a flattened tree structure using
    integer indices for parent-child relationships. Links are stored in
    breadth-first order from the root, so every parent index is smaller than
    the index of its children.

    Attributes:
        link_names: Tuple of all link names. Index corresponds to link ID.
                    Marked as a static field for JIT compilation.
        joint_names: Tuple of all actuated (non-fixed) joint names, in the
                     canonical order of configuration vectors.
        actuated_link_indices: Tuple with, for each entry of ``joint_names``,
                               the index of the child link that joint moves.
        parent_indices: Array of shape (num_links,) where parent_indices[i]
                       is the parent link index of link i. Root link parents itself.
        joint_transforms: Array of shape (num_links, 4, 4) containing SE(3)
                         transformations from each link to its parent.
        joint_axes: Array of shape (num_links, 6) containing 6D se(3) twist
                   vectors for each joint. [vx,vy,vz,wx,wy,wz] format.
        joint_limits: Array of shape (num_dof, 2) with lower and upper joint
                      limits. Unbounded joints carry -inf / inf.
    """
    link_names: Tuple[str, ...] = struct.field(pytree_node=False)
    joint_names: Tuple[str, ...] = struct.field(pytree_node=False)
    actuated_link_indices: Tuple[int, ...] = struct.field(pytree_node=False)
    parent_indices: Array
    joint_transforms: Array
    joint_axes: Array
    joint_limits: Array

    @property
    def num_dof(self) -> int:
        return len(self.joint_names)

    @property
    def num_links(self) -> int:
        return len(self.link_names)

    @property
    def root_link(self) -> str:
        """Name of the root link, which is also the world frame."""
        return self.link_names[0]

    def link_index(self, name: str) -> int:
        """Return the index of link ``name``.

        Raises:
            FrameMismatchError: if the link is not part of the model.
        """
        try:
            return self.link_names.index(name)
        except ValueError:
            raise FrameMismatchError(name) from None
