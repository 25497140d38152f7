"""SE(3) rigid body transforms as 4x4 homogeneous matrices.

``from_position_and_rotation`` builds constant transforms with NumPy. The
remaining functions take a scalar backend and work for every scalar type
the backend supports: NumPy arrays, JAX arrays and NumPy object arrays of
SymPy expressions or mpmath intervals.
"""

import numpy as np

from ..backends import ScalarBackend
from . import so3


def from_position_and_rotation(p: np.ndarray, R: np.ndarray) -> np.ndarray:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: (3,) position vector
        R: (3, 3) rotation matrix

    Returns:
        (4, 4) homogeneous transformation matrix
    """
    T = np.eye(4)
    T[:3, :3] = R
    T[:3, 3] = p
    return T


def joint_motion(axis: np.ndarray, q, backend: ScalarBackend):
    """
    Transform produced by a single-DOF joint at position ``q``.

    Args:
        axis: (6,) twist [vx, vy, vz, wx, wy, wz]. A non-zero angular part
              means a revolute joint about that unit axis, otherwise a
              prismatic joint along the linear part.
        q: joint position (radians or metres)
        backend: scalar backend matching ``q``

    Returns:
        (4, 4) homogeneous matrix in the backend's array type
    """
    v, w = np.asarray(axis[:3], dtype=float), np.asarray(axis[3:], dtype=float)
    if np.any(w != 0.0):
        rows = [row + [0.0] for row in so3.rodrigues_rows(w, q, backend)]
    else:
        rows = [
            [1.0 if i == j else 0.0 for j in range(3)] + [float(v[i]) * q if v[i] != 0.0 else 0.0]
            for i in range(3)
        ]
    rows.append([0.0, 0.0, 0.0, 1.0])
    return backend.matrix(rows)


def multiply(T1, T2, backend: ScalarBackend):
    """
    Multiply two SE(3) transformation matrices.

    Returns:
        (4, 4) result of T1 @ T2
    """
    return backend.matmul(T1, T2)


def apply(T, point, backend: ScalarBackend):
    """
    Apply SE(3) transformation to a point.

    Args:
        T: (4, 4) transformation matrix
        point: (3,) point

    Returns:
        (3,) transformed point R @ p + t
    """
    rotated = backend.matmul(T[:3, :3], point)
    return [rotated[i] + T[i, 3] for i in range(3)]


def apply_inverse(T, point, backend: ScalarBackend):
    """
    Apply the inverse of an SE(3) transformation to a point.

    Uses the block structure T^-1 p = R^T (p - t), so no matrix inverse
    is formed.

    Args:
        T: (4, 4) transformation matrix
        point: (3,) point

    Returns:
        (3,) point expressed in the frame T maps from
    """
    shifted = backend.matrix([point[i] - T[i, 3] for i in range(3)])
    return list(backend.matmul(T[:3, :3].T, shifted))
