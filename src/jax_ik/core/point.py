"""Points tagged with the frame they are expressed in."""

from typing import Sequence, Tuple

from flax import struct

from .robot_model import RobotModel


@struct.dataclass
class Point3D:
    """A 3D coordinate paired with a frame name.

    The frame is the name of a link of a RobotModel. A point on the root link
    is fixed in the world; a point on any other link moves with the joints.
    Coordinates are plain Python floats so the point can be combined with any
    scalar type during evaluation.
    """
    frame: str = struct.field(pytree_node=False)
    coordinates: Tuple[float, float, float] = struct.field(pytree_node=False)

    @classmethod
    def on_body(cls, robot: RobotModel, link: str, xyz: Sequence[float] = (0.0, 0.0, 0.0)) -> "Point3D":
        """Point rigidly attached to ``link`` at ``xyz`` in that link's frame."""
        robot.link_index(link)
        return cls(frame=link, coordinates=_as_xyz(xyz))

    @classmethod
    def fixed(cls, robot: RobotModel, xyz: Sequence[float]) -> "Point3D":
        """Point fixed in the world (root) frame."""
        return cls(frame=robot.root_link, coordinates=_as_xyz(xyz))


def _as_xyz(xyz: Sequence[float]) -> Tuple[float, float, float]:
    values = tuple(float(v) for v in xyz)
    if len(values) != 3:
        raise ValueError(f"A point needs 3 coordinates, got {len(values)}")
    return values
