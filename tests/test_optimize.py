"""Tests for the local and global inverse kinematics solvers."""

import jax
import jax.numpy as jnp
import mpmath
import numpy as np
import pytest

from jax_ik import evaluate
from jax_ik.chain import point_position
from jax_ik.core import Point3D
from jax_ik.errors import ConfigurationLengthError
from jax_ik.optimize import solve_global, solve_local
from jax_ik.optimize.interval import interval_bounds

PLANAR_BOUNDS = [(-np.pi, np.pi), (-np.pi, np.pi)]


@pytest.fixture(scope="module")
def planar_residual(planar):
    return evaluate(planar, Point3D.on_body(planar, "tool"), Point3D.fixed(planar, (0.5, 0.5, 0.0)))


def test_local_panda_reaches_target(panda):
    """7-DOF arm, end-effector origin to (0.5, 0.5, 0.5) from the zero configuration."""
    point = Point3D.on_body(panda, "panda_link8")
    residual = evaluate(panda, point, Point3D.fixed(panda, (0.5, 0.5, 0.5)))

    result = solve_local(residual, np.zeros(panda.num_dof))

    assert result.residual < 1e-3
    assert result.q.shape == (7,)
    np.testing.assert_allclose(point_position(panda, result.q, point), [0.5, 0.5, 0.5], atol=1e-3)


def test_local_respects_bounds(panda):
    residual = evaluate(panda, Point3D.on_body(panda, "panda_link8"), Point3D.fixed(panda, (0.5, 0.5, 0.5)))
    limits = np.asarray(panda.joint_limits)
    q0 = np.clip(np.zeros(7), limits[:, 0], limits[:, 1])

    result = solve_local(residual, q0, bounds=[tuple(row) for row in limits])

    assert np.all(result.q >= limits[:, 0] - 1e-9)
    assert np.all(result.q <= limits[:, 1] + 1e-9)
    assert result.residual < 1e-3


def test_local_starting_at_exact_solution(planar):
    """Tool reaches (1, 0, 0) with both joints at zero."""
    residual = evaluate(planar, Point3D.on_body(planar, "tool"), Point3D.fixed(planar, (1.0, 0.0, 0.0)))

    assert residual(np.zeros(2)) == 0.0
    grad = jax.grad(lambda q: residual(q) ** 2)(jnp.zeros(2))
    assert np.all(np.isfinite(grad))

    result = solve_local(residual, np.zeros(2))
    assert result.success, result.message
    assert result.residual == 0.0
    np.testing.assert_allclose(result.q, [0.0, 0.0])


def test_global_panda_encloses_local_solution(panda):
    point = Point3D.on_body(panda, "panda_link8")
    residual = evaluate(panda, point, Point3D.fixed(panda, (0.5, 0.5, 0.5)))
    local = solve_local(residual, np.zeros(panda.num_dof))

    result = solve_global(residual, [(-10.0, 10.0)] * panda.num_dof, tol=1e-2, max_iterations=50)

    assert result.lower <= 1e-3
    assert result.lower <= local.residual
    assert result.contains(local.q)


def test_local_wrong_initial_length(planar_residual):
    with pytest.raises(ConfigurationLengthError):
        solve_local(planar_residual, np.zeros(3))


def test_global_planar_encloses_minimum(planar_residual):
    result = solve_global(planar_residual, PLANAR_BOUNDS, tol=0.05)

    assert result.converged
    assert result.lower <= 1e-3
    assert result.lower <= result.upper
    assert result.upper < 0.1
    assert planar_residual(result.best_point) <= result.upper + 1e-12
    assert result.minimizers

    local = solve_local(planar_residual, np.zeros(2))
    assert local.residual < 1e-5
    assert result.lower <= local.residual

    # Every global minimiser of a reachable target must lie in a candidate box
    wrapped = (local.q + np.pi) % (2 * np.pi) - np.pi
    assert result.contains(wrapped)
    assert not result.contains([10.0, 10.0])


def test_global_budget_keeps_enclosure_valid(planar_residual):
    result = solve_global(planar_residual, PLANAR_BOUNDS, tol=0.05, max_iterations=5)

    assert not result.converged
    assert result.iterations == 5
    # The true minimum is 0, it must stay inside the enclosure
    assert result.lower <= 1e-12
    assert result.upper >= 0.0


def test_global_unreachable_target(planar):
    residual = evaluate(planar, Point3D.on_body(planar, "tool"), Point3D.fixed(planar, (2.0, 0.0, 0.0)))
    result = solve_global(residual, PLANAR_BOUNDS, tol=0.05)
    # The arm reaches 1.0, so the minimum distance is 1.0
    assert result.lower <= 1.0 <= result.upper
    assert result.lower > 0.8


def test_global_rejects_infinite_bounds(planar_residual):
    with pytest.raises(ValueError):
        solve_global(planar_residual, [(-np.inf, np.inf), (0.0, 1.0)])


def test_interval_bounds_round_outward():
    assert interval_bounds(mpmath.iv.mpf([1, 2])) == (1.0, 2.0)
    assert interval_bounds(0.25) == (0.25, 0.25)

    with mpmath.iv.workprec(200):
        third = mpmath.iv.mpf(1) / 3
    lo, hi = interval_bounds(third)
    assert lo < hi
    assert third.a >= lo
    assert third.b <= hi
