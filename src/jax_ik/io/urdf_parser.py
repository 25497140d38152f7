"""URDF parser for loading robot models into JAX-native data structures.

This module provides functionality to parse URDF files and convert them
into RobotModel PyTree structures. Only the kinematic part of the
description is read: links, joints, joint origins, axes and limits.
"""

import logging
from collections import deque
from typing import Dict, List

import jax.numpy as jnp
import numpy as np
from lxml import etree

from jax_ik.core.robot_model import RobotModel
from jax_ik.errors import URDFParseError
from jax_ik.transforms import se3, so3

logger = logging.getLogger(__name__)

SUPPORTED_JOINT_TYPES = ("revolute", "continuous", "prismatic", "fixed")


def load_urdf(urdf_path: str) -> RobotModel:
    """Load a URDF file and convert it to a RobotModel PyTree.

    Args:
        urdf_path: Path to the URDF file to load.

    Returns:
        RobotModel: A JAX-native robot representation.
    """
    try:
        tree = etree.parse(str(urdf_path))
    except (OSError, etree.XMLSyntaxError) as e:
        raise URDFParseError(f"Cannot read URDF '{urdf_path}': {e}") from e
    logger.debug("Loaded URDF from %s", urdf_path)
    return _build_model(tree.getroot())


def parse_urdf(urdf_string: str) -> RobotModel:
    """Parse a URDF document held in a string."""
    try:
        root = etree.fromstring(urdf_string.encode())
    except etree.XMLSyntaxError as e:
        raise URDFParseError(f"Malformed URDF: {e}") from e
    return _build_model(root)


def _build_model(root) -> RobotModel:
    # First pass: Build topology mappings
    all_links = [link.get('name') for link in root.findall('.//link')]
    link_set = set(all_links)
    child_to_parent_map: Dict[str, str] = {}
    joints_info: List[dict] = []

    for joint in root.findall('.//joint'):
        joint_name = joint.get('name')
        joint_type = joint.get('type')
        if joint_type not in SUPPORTED_JOINT_TYPES:
            raise URDFParseError(f"Joint '{joint_name}' has unsupported type '{joint_type}'")

        parent_elem = joint.find('parent')
        child_elem = joint.find('child')
        if parent_elem is None or child_elem is None:
            raise URDFParseError(f"Joint '{joint_name}' needs both a parent and a child link")

        parent_name = parent_elem.get('link')
        child_name = child_elem.get('link')
        for name in (parent_name, child_name):
            if name not in link_set:
                raise URDFParseError(f"Joint '{joint_name}' references unknown link '{name}'")
        if child_name in child_to_parent_map:
            raise URDFParseError(f"Link '{child_name}' has more than one parent joint")

        child_to_parent_map[child_name] = parent_name
        joints_info.append({
            'name': joint_name,
            'type': joint_type,
            'parent': parent_name,
            'child': child_name,
            'joint_elem': joint,
        })

    # Find root link (not a child of any joint)
    root_links = [name for name in all_links if name not in child_to_parent_map]
    if len(root_links) != 1:
        raise URDFParseError(f"Expected exactly one root link, found: {root_links}")
    root_link = root_links[0]

    # Order links using breadth-first traversal from root
    ordered_links = []
    queue = deque([root_link])
    visited = set()
    while queue:
        current_link = queue.popleft()
        if current_link in visited:
            continue
        visited.add(current_link)
        ordered_links.append(current_link)
        for joint_info in joints_info:
            if joint_info['parent'] == current_link and joint_info['child'] not in visited:
                queue.append(joint_info['child'])

    if len(ordered_links) != len(link_set):
        unreachable = sorted(link_set - visited)
        raise URDFParseError(f"Links not connected to root '{root_link}': {unreachable}")

    link_map = {name: i for i, name in enumerate(ordered_links)}
    joint_by_child = {info['child']: info for info in joints_info}

    # Actuated joints follow link order so parents come before children
    actuated = [joint_by_child[name] for name in ordered_links[1:]
                if joint_by_child[name]['type'] != 'fixed']

    # Second pass: Populate data arrays
    parent_indices_list = []
    joint_transforms_list = []
    joint_axes_list = []
    for i, link_name in enumerate(ordered_links):
        if link_name == root_link:
            parent_indices_list.append(i)  # Root parents itself
            joint_transforms_list.append(np.eye(4))
            joint_axes_list.append(np.zeros(6))
            continue

        parent_indices_list.append(link_map[child_to_parent_map[link_name]])
        joint_info = joint_by_child[link_name]
        joint_transforms_list.append(_parse_origin(joint_info['joint_elem']))
        joint_axes_list.append(_parse_axis(joint_info))

    joint_limits = np.array([_parse_limits(info) for info in actuated]).reshape(-1, 2)

    robot = RobotModel(
        link_names=tuple(ordered_links),
        joint_names=tuple(info['name'] for info in actuated),
        actuated_link_indices=tuple(link_map[info['child']] for info in actuated),
        parent_indices=jnp.array(parent_indices_list, dtype=jnp.int32),
        joint_transforms=jnp.array(np.stack(joint_transforms_list)),
        joint_axes=jnp.array(np.stack(joint_axes_list)),
        joint_limits=jnp.array(joint_limits),
    )
    logger.debug("Built robot model: %d links, %d degrees of freedom, root '%s'",
                 robot.num_links, robot.num_dof, root_link)
    return robot


def _parse_floats(text: str, name: str) -> np.ndarray:
    try:
        values = np.array([float(x) for x in text.split()])
    except ValueError:
        raise URDFParseError(f"Invalid {name} attribute: '{text}'") from None
    if values.shape != (3,):
        raise URDFParseError(f"Attribute {name} needs 3 values, got '{text}'")
    return values


def _parse_origin(joint_elem) -> np.ndarray:
    origin_elem = joint_elem.find('origin')
    if origin_elem is None:
        return np.eye(4)
    xyz = _parse_floats(origin_elem.get('xyz', '0 0 0'), 'xyz')
    rpy = _parse_floats(origin_elem.get('rpy', '0 0 0'), 'rpy')
    return se3.from_position_and_rotation(xyz, so3.from_rpy(rpy))


def _parse_axis(joint_info: dict) -> np.ndarray:
    joint_type = joint_info['type']
    if joint_type == 'fixed':
        return np.zeros(6)

    axis_elem = joint_info['joint_elem'].find('axis')
    axis_xyz = np.array([0.0, 0.0, 1.0])  # Default Z axis
    if axis_elem is not None:
        axis_xyz = _parse_floats(axis_elem.get('xyz', '0 0 1'), 'axis')
    norm = np.linalg.norm(axis_xyz)
    if norm < 1e-12:
        raise URDFParseError(f"Joint '{joint_info['name']}' has a zero axis")
    axis_xyz = axis_xyz / norm

    if joint_type == 'prismatic':
        # Prismatic: [vx, vy, vz, 0, 0, 0]
        return np.concatenate([axis_xyz, np.zeros(3)])
    # Revolute: [0, 0, 0, wx, wy, wz]
    return np.concatenate([np.zeros(3), axis_xyz])


def _parse_limits(joint_info: dict) -> List[float]:
    limit_elem = joint_info['joint_elem'].find('limit')
    if joint_info['type'] == 'continuous' or limit_elem is None:
        return [-np.inf, np.inf]
    # URDF defaults missing lower/upper attributes to 0
    try:
        lower = float(limit_elem.get('lower', '0'))
        upper = float(limit_elem.get('upper', '0'))
    except ValueError:
        raise URDFParseError(f"Joint '{joint_info['name']}' has a non-numeric limit") from None
    if lower > upper:
        raise URDFParseError(f"Joint '{joint_info['name']}' has lower limit above upper limit")
    return [lower, upper]
