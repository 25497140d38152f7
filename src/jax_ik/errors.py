"""Exception types raised by jax_ik.

All of them are caller errors. They subclass ``ValueError`` so code that
already guards kinematics calls with ``except ValueError`` keeps working.
"""


class KinematicsError(ValueError):
    """Base class for every error raised by this package."""


class ConfigurationLengthError(KinematicsError):
    """A configuration vector does not have one entry per degree of freedom."""

    def __init__(self, expected: int, got: int):
        super().__init__(f"Configuration has {got} entries, robot has {expected} degrees of freedom")
        self.expected = expected
        self.got = got


class FrameMismatchError(KinematicsError):
    """A frame name is not part of the robot's frame tree."""

    def __init__(self, frame: str):
        super().__init__(f"Frame '{frame}' not found in robot model")
        self.frame = frame


class UnsupportedScalarTypeError(KinematicsError):
    """The scalar type of a configuration lacks an operation FK needs."""


class URDFParseError(KinematicsError):
    """The robot description could not be turned into a RobotModel."""
