"""Shared fixtures for the test suite."""

from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from jax_ik.io import load_urdf  # noqa: E402

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def panda():
    return load_urdf(str(FIXTURES / "panda_arm.urdf"))


@pytest.fixture(scope="session")
def planar():
    return load_urdf(str(FIXTURES / "planar_2dof.urdf"))
