"""Tests for scenario configuration."""

from pathlib import Path

import pytest

from jax_ik.config import GlobalSolverConfig, ScenarioConfig, config_from_dict, load_config
from jax_ik.errors import KinematicsError

FIXTURES = Path(__file__).parent / "fixtures"


def test_defaults():
    config = config_from_dict(None)
    assert config == ScenarioConfig()
    assert config.target == (0.5, 0.5, 0.5)
    assert config.global_ == GlobalSolverConfig()


def test_load_scenario_file():
    config = load_config(FIXTURES / "scenario.yaml")
    assert Path(config.urdf_path) == FIXTURES / "panda_arm.urdf"
    assert config.end_effector == "panda_link8"
    assert config.local.gtol == 1e-12
    assert config.global_.enabled is False
    assert config.global_.tol == GlobalSolverConfig().tol


def test_sections_and_tuples():
    config = config_from_dict({
        "target": [1, 2, 3],
        "initial_configuration": [0, 0],
        "global": {"bound": 3.0, "max_iterations": 10},
    })
    assert config.target == (1.0, 2.0, 3.0)
    assert config.initial_configuration == (0.0, 0.0)
    assert config.global_.bound == 3.0
    assert config.global_.max_iterations == 10


@pytest.mark.parametrize("data", [{"tagret": [0, 0, 0]}, {"local": {"step": 1}}])
def test_unknown_keys_rejected(data):
    with pytest.raises(KinematicsError, match="Unknown"):
        config_from_dict(data)


def test_internal_section_name_rejected():
    with pytest.raises(KinematicsError, match="global_"):
        config_from_dict({"global_": {"bound": 1.0}})


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(KinematicsError):
        load_config(path)
