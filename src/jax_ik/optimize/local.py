"""Local inverse kinematics with SciPy and JAX automatic differentiation."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import jax
import jax.numpy as jnp
import numpy as np
from scipy.optimize import minimize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalResult:
    """Outcome of a local solve.

    Attributes:
        q: best configuration found
        residual: residual at ``q``
        iterations: optimiser iterations
        success: SciPy's convergence flag
        message: SciPy's termination message
    """
    q: np.ndarray
    residual: float
    iterations: int
    success: bool
    message: str


def solve_local(
    residual: Callable,
    q0: Sequence[float],
    *,
    method: Optional[str] = None,
    bounds: Optional[Sequence[Tuple[float, float]]] = None,
    gtol: float = 1e-12,
    max_iterations: int = 1000,
) -> LocalResult:
    """Minimise ``residual`` starting from ``q0``.

    The squared residual is minimised because it is smooth where the residual
    reaches zero; the reported value is the residual itself. Gradients come
    from ``jax.value_and_grad`` over the same residual function.

    Args:
        residual: callable built by ``jax_ik.residual.evaluate``
        q0: initial configuration
        method: SciPy method. Defaults to BFGS, or L-BFGS-B when ``bounds``
            is given.
        bounds: optional (lower, upper) per degree of freedom
        gtol: gradient tolerance passed to SciPy
        max_iterations: iteration cap passed to SciPy

    Returns:
        LocalResult
    """
    def objective(q):
        return residual(q) ** 2

    value_and_grad = jax.jit(jax.value_and_grad(objective))

    def fun(q):
        value, grad = value_and_grad(jnp.asarray(q))
        return float(value), np.asarray(grad, dtype=float)

    if method is None:
        method = "L-BFGS-B" if bounds is not None else "BFGS"
    options = {"maxiter": max_iterations, "gtol": gtol}
    if method == "L-BFGS-B":
        options["ftol"] = 1e-15

    x0 = np.asarray(q0, dtype=float)
    logger.debug("Starting %s from %s", method, x0)
    result = minimize(fun, x0, jac=True, method=method, bounds=bounds, options=options)

    q = np.asarray(result.x, dtype=float)
    value = float(residual(q))
    logger.info("%s finished after %d iterations: residual %.3e (%s)",
                method, getattr(result, "nit", 0), value, result.message)
    return LocalResult(
        q=q,
        residual=value,
        iterations=int(getattr(result, "nit", 0)),
        success=bool(result.success),
        message=str(result.message),
    )
