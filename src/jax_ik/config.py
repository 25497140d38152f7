"""YAML configuration for inverse kinematics scenarios.

A scenario file looks like::

    urdf_path: panda_arm.urdf
    end_effector: panda_link8
    point_offset: [0.0, 0.0, 0.0]
    target: [0.5, 0.5, 0.5]
    local:
      gtol: 1.0e-12
    global:
      bound: 10.0
      tol: 1.0e-2
      max_iterations: 2000

Every key is optional; missing keys keep the defaults below.
"""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .errors import KinematicsError


@dataclass(frozen=True)
class LocalSolverConfig:
    method: Optional[str] = None
    gtol: float = 1e-12
    max_iterations: int = 1000


@dataclass(frozen=True)
class GlobalSolverConfig:
    enabled: bool = True
    bound: float = 10.0  # every joint searched in [-bound, bound]
    tol: float = 1e-2
    max_iterations: int = 100_000


@dataclass(frozen=True)
class ScenarioConfig:
    urdf_path: str = "panda_arm.urdf"
    end_effector: str = "panda_link8"
    point_offset: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    target: Tuple[float, float, float] = (0.5, 0.5, 0.5)
    initial_configuration: Optional[Tuple[float, ...]] = None  # zeros when None
    symbolic: bool = False
    plot: bool = False
    local: LocalSolverConfig = field(default_factory=LocalSolverConfig)
    global_: GlobalSolverConfig = field(default_factory=GlobalSolverConfig)


_SECTIONS = {"local": ("local", LocalSolverConfig), "global": ("global_", GlobalSolverConfig)}


def _build(cls, values: Dict[str, Any], where: str):
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise KinematicsError(f"Unknown {where} config keys: {unknown}")
    return cls(**values)


def config_from_dict(data: Optional[Dict[str, Any]], base_dir: Optional[Path] = None) -> ScenarioConfig:
    """Build a ScenarioConfig from a parsed YAML mapping.

    Relative ``urdf_path`` values are resolved against ``base_dir``.
    """
    data = dict(data or {})
    internal = sorted(attr for key, (attr, _) in _SECTIONS.items() if attr != key and attr in data)
    if internal:
        raise KinematicsError(f"Unknown scenario config keys: {internal}")
    sections = {}
    for key, (attr, cls) in _SECTIONS.items():
        sections[attr] = _build(cls, dict(data.pop(key, None) or {}), key)

    for key in ("point_offset", "target", "initial_configuration"):
        if data.get(key) is not None:
            data[key] = tuple(float(v) for v in data[key])
    if "urdf_path" in data and base_dir is not None and not Path(data["urdf_path"]).is_absolute():
        data["urdf_path"] = str(Path(base_dir) / data["urdf_path"])

    return _build(ScenarioConfig, {**data, **sections}, "scenario")


def load_config(path) -> ScenarioConfig:
    """Load a scenario from a YAML file."""
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise KinematicsError(f"Config file {path} must contain a mapping")
    return config_from_dict(data, base_dir=path.parent)
