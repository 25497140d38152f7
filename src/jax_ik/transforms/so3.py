"""SO(3) and so(3) helpers.

Constant rotations (URDF origins) are built with plain NumPy. Joint
rotations depend on the joint angle and are assembled through a scalar
backend so the same code serves floats, JAX tracers, SymPy symbols and
intervals.
"""

import numpy as np

from ..backends import ScalarBackend


def skew_symmetric(v: np.ndarray) -> np.ndarray:
    """
    Convert 3D vector to skew-symmetric matrix.

    Args:
        v: (3,) vector

    Returns:
        (3, 3) skew-symmetric matrix
    """
    x, y, z = (float(c) for c in v)
    return np.array([
        [0.0, -z, y],
        [z, 0.0, -x],
        [-y, x, 0.0],
    ])


def from_rpy(rpy: np.ndarray) -> np.ndarray:
    """Convert roll-pitch-yaw angles to rotation matrix.

    Args:
        rpy: Array of [roll, pitch, yaw] angles in radians.

    Returns:
        3x3 rotation matrix R = R_z(yaw) @ R_y(pitch) @ R_x(roll).
    """
    roll, pitch, yaw = rpy

    R_x = np.array([
        [1, 0, 0],
        [0, np.cos(roll), -np.sin(roll)],
        [0, np.sin(roll), np.cos(roll)]
    ])

    R_y = np.array([
        [np.cos(pitch), 0, np.sin(pitch)],
        [0, 1, 0],
        [-np.sin(pitch), 0, np.cos(pitch)]
    ])

    R_z = np.array([
        [np.cos(yaw), -np.sin(yaw), 0],
        [np.sin(yaw), np.cos(yaw), 0],
        [0, 0, 1]
    ])

    return R_z @ R_y @ R_x


def rodrigues_rows(axis: np.ndarray, angle, backend: ScalarBackend) -> list:
    """
    Rotation about a fixed unit ``axis`` by a variable ``angle``.

    Implements Rodrigues' formula R = I + sin(θ) K + (1 - cos(θ)) K² with the
    constant parts precomputed, and returns the rotation as three rows of
    scalars so callers can extend them into a homogeneous matrix.

    Args:
        axis: (3,) unit rotation axis (floats)
        angle: joint angle, any scalar type the backend understands
        backend: scalar backend matching ``angle``

    Returns:
        3 x 3 nested list of scalars
    """
    K = skew_symmetric(axis)
    K_sq = K @ K
    s = backend.sin(angle)
    one_minus_c = 1.0 - backend.cos(angle)

    rows = []
    for i in range(3):
        row = []
        for j in range(3):
            row.append(_affine(1.0 if i == j else 0.0, K[i, j], s, K_sq[i, j], one_minus_c))
        rows.append(row)
    return rows


def _affine(c0: float, c1: float, x1, c2: float, x2):
    """c0 + c1 * x1 + c2 * x2, leaving out terms with a zero coefficient."""
    value = float(c0)
    for coefficient, x in ((c1, x1), (c2, x2)):
        if coefficient == 0.0:
            continue
        term = float(coefficient) * x
        value = term if isinstance(value, float) and value == 0.0 else value + term
    return value
