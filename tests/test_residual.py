"""Tests for the point-to-target residual."""

from decimal import Decimal

import jax
import jax.numpy as jnp
import mpmath
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_ik import evaluate
from jax_ik.chain import point_position
from jax_ik.core import Point3D
from jax_ik.errors import ConfigurationLengthError, FrameMismatchError, UnsupportedScalarTypeError
from jax_ik.optimize.interval import interval_bounds

Q_NONZERO = [0.1, -0.2, 0.3, -0.4, 0.5, -0.6, 0.7]

configurations = st.lists(
    st.floats(min_value=-10.0, max_value=10.0, allow_nan=False), min_size=7, max_size=7
)


@pytest.fixture(scope="module")
def panda_residual(panda):
    point = Point3D.on_body(panda, "panda_link8")
    target = Point3D.fixed(panda, (0.5, 0.5, 0.5))
    return evaluate(panda, point, target)


def test_residual_at_zero_configuration(panda_residual):
    expected = np.linalg.norm(np.array([0.088, 0.0, 0.926]) - 0.5)
    np.testing.assert_allclose(panda_residual([0.0] * 7), expected, atol=1e-9)


@given(configurations)
@settings(deadline=None, max_examples=30)
def test_residual_is_non_negative(panda_residual, q):
    assert panda_residual(q) >= 0.0


def test_residual_zero_when_points_coincide(panda):
    point = Point3D.on_body(panda, "panda_link8", (0.0, 0.0, 0.1))
    target_xyz = point_position(panda, Q_NONZERO, point)
    residual = evaluate(panda, point, Point3D.fixed(panda, target_xyz))
    assert residual(Q_NONZERO) < 1e-9


def test_repeated_evaluation_is_identical(panda_residual):
    first = panda_residual(Q_NONZERO)
    panda_residual([0.0] * 7)
    assert panda_residual(Q_NONZERO) == first


def test_jax_and_numpy_paths_agree(panda_residual):
    plain = panda_residual(Q_NONZERO)
    value, grad = jax.value_and_grad(panda_residual)(jnp.array(Q_NONZERO))
    np.testing.assert_allclose(value, plain, rtol=1e-12)
    assert grad.shape == (7,)


def test_gradient_matches_finite_differences(panda_residual):
    grad = np.asarray(jax.grad(panda_residual)(jnp.array(Q_NONZERO)))
    eps = 1e-6
    numeric = []
    for i in range(7):
        up, down = list(Q_NONZERO), list(Q_NONZERO)
        up[i] += eps
        down[i] -= eps
        numeric.append((panda_residual(up) - panda_residual(down)) / (2 * eps))
    np.testing.assert_allclose(grad, numeric, atol=1e-7)


def test_jit_residual(panda_residual):
    np.testing.assert_allclose(
        jax.jit(panda_residual)(jnp.array(Q_NONZERO)), panda_residual(Q_NONZERO), rtol=1e-12
    )


def test_interval_evaluation_encloses_float_value(panda_residual):
    value = panda_residual(Q_NONZERO)
    lo, hi = interval_bounds(panda_residual([mpmath.iv.mpf(q) for q in Q_NONZERO]))
    assert lo - 1e-12 <= value <= hi + 1e-12
    assert hi - lo < 1e-9


def test_interval_box_bounds_sampled_values(panda_residual):
    rng = np.random.default_rng(0)
    box = [(q - 0.05, q + 0.05) for q in Q_NONZERO]
    lo, hi = interval_bounds(panda_residual([mpmath.iv.mpf([a, b]) for a, b in box]))
    for _ in range(20):
        sample = [rng.uniform(a, b) for a, b in box]
        assert lo - 1e-12 <= panda_residual(sample) <= hi + 1e-12


def test_states_cached_per_scalar_type(panda):
    residual = evaluate(panda, Point3D.on_body(panda, "panda_link8"), Point3D.fixed(panda, (0.5, 0.5, 0.5)))
    residual([0.0] * 7)
    residual(Q_NONZERO)
    assert list(residual.states) == [float]
    residual(np.array(Q_NONZERO))
    residual(jnp.array(Q_NONZERO))
    residual(jnp.zeros(7))
    assert len(residual.states) == 3
    assert np.float64 in residual.states


def test_wrong_length_raises(panda_residual):
    with pytest.raises(ConfigurationLengthError) as info:
        panda_residual([0.0] * 6)
    assert info.value.expected == 7
    assert info.value.got == 6
    with pytest.raises(ConfigurationLengthError):
        panda_residual([0.0] * 8)


def test_unknown_frame_raises(panda):
    with pytest.raises(FrameMismatchError):
        Point3D.on_body(panda, "gripper")
    stray = Point3D(frame="gripper", coordinates=(0.0, 0.0, 0.0))
    with pytest.raises(FrameMismatchError):
        evaluate(panda, stray, Point3D.fixed(panda, (0.0, 0.0, 0.0)))
    with pytest.raises(FrameMismatchError):
        evaluate(panda, Point3D.on_body(panda, "panda_link8"), stray)


def test_unsupported_scalar_type(panda_residual):
    with pytest.raises(UnsupportedScalarTypeError):
        panda_residual([Decimal("0.1")] * 7)


def test_target_on_moving_body(planar):
    # The tool stays 0.5 away from the elbow whatever the joints do
    tool = Point3D.on_body(planar, "tool")
    elbow = Point3D.on_body(planar, "upper_arm", (0.5, 0.0, 0.0))
    residual = evaluate(planar, tool, elbow)
    for q in ([0.0, 0.0], [1.0, -2.0], [3.0, 0.5]):
        np.testing.assert_allclose(residual(q), 0.5, atol=1e-12)


def test_target_in_moving_frame_uses_target_coordinates(planar):
    # Target 0.5 along the forearm's x axis is the tool origin
    tool = Point3D.on_body(planar, "tool")
    target = Point3D.on_body(planar, "forearm", (0.5, 0.0, 0.0))
    residual = evaluate(planar, tool, target)
    assert residual([0.4, -1.3]) < 1e-12


def test_gradient_finite_at_exact_solution(panda):
    point = Point3D.on_body(panda, "panda_link8")
    target = Point3D.on_body(panda, "panda_link8")
    residual = evaluate(panda, point, target)
    grad = jax.grad(residual)(jnp.zeros(panda.num_dof))
    np.testing.assert_array_equal(grad, np.zeros(panda.num_dof))
