"""Symbolic form of a residual function, derived with SymPy."""

import logging
from typing import Callable, Tuple

import numpy as np
import sympy

logger = logging.getLogger(__name__)


def joint_symbols(num_dof: int) -> Tuple[sympy.Symbol, ...]:
    """Real symbols ``q1 .. qN`` standing in for the joint positions."""
    if num_dof == 0:
        return ()
    return sympy.symbols(f"q1:{num_dof + 1}", real=True)


def symbolic_residual(residual: Callable, num_dof: int, simplify: bool = False):
    """Evaluate ``residual`` on symbols and return the resulting expression.

    Args:
        residual: callable built by ``jax_ik.residual.evaluate``
        num_dof: number of joint symbols to create
        simplify: run ``sympy.simplify`` on the result. This can take a long
            time for arms with many joints.

    Returns:
        (expression, symbols)
    """
    symbols = joint_symbols(num_dof)
    expression = residual(list(symbols))
    if simplify:
        logger.debug("Simplifying residual expression with %d operations", sympy.count_ops(expression))
        expression = sympy.simplify(expression)
    return expression, symbols


def lambdify_residual(expression, symbols) -> Callable[[np.ndarray], float]:
    """Compile a symbolic residual into a NumPy function of a configuration vector."""
    fn = sympy.lambdify(symbols, expression, modules="numpy")

    def residual(q):
        return fn(*q)

    return residual
