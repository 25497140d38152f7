"""Scalar backends: the math forward kinematics needs, per scalar type.

The residual functions in this package are written once and run under
several scalar types. A backend supplies the few operations that differ
between them:

- ``sin``, ``cos``, ``sqrt`` of a scalar,
- ``matrix(rows)`` to assemble a matrix from nested lists of scalars,
- ``constant(values)`` to bring a float array into the backend,
- ``matmul(a, b)``.

Everything else (``+``, ``-``, ``*``, integer powers, indexing) is done with
the scalars' own operators. Supported scalar types:

===================  =====================================================
Backend              Scalars
===================  =====================================================
``NumpyBackend``     Python / NumPy floats and ints
``JaxBackend``       JAX arrays and tracers (``grad``, ``jit``, ``vmap``)
``SympyBackend``     SymPy expressions and symbols
``IntervalBackend``  mpmath intervals (``mpmath.iv.mpf``)
``ObjectBackend``    anything else; ``np.sin`` and friends dispatch to the
                     scalar's own ``sin`` / ``cos`` / ``sqrt`` methods
===================  =====================================================
"""

import numbers
from typing import Any, Hashable, Sequence, Tuple

import jax
import jax.numpy as jnp
import mpmath
import numpy as np
import sympy


class ScalarBackend:
    """Base backend working on NumPy object arrays."""

    name = "object"

    def sin(self, x):
        return np.sin(x)

    def cos(self, x):
        return np.cos(x)

    def sqrt(self, x):
        return np.sqrt(x)

    def constant(self, values) -> np.ndarray:
        return np.array(np.asarray(values, dtype=float).tolist(), dtype=object)

    def matrix(self, rows: Sequence[Sequence[Any]]) -> np.ndarray:
        return np.array(rows, dtype=object)

    def matmul(self, a, b):
        # Exact float zeros and ones are skipped so symbolic and interval
        # entries only pick up the terms that actually depend on them.
        a_rows = a.tolist()
        b_cols = b.T.tolist() if b.ndim == 2 else [b.tolist()]
        out = [[_dot(row, col) for col in b_cols] for row in a_rows]
        if b.ndim == 1:
            return np.array([row[0] for row in out], dtype=object)
        return np.array(out, dtype=object)

    def __repr__(self):
        return f"{type(self).__name__}()"


def _dot(row, col):
    total = 0.0
    for x, y in zip(row, col):
        if _is_exact(x, 0.0) or _is_exact(y, 0.0):
            continue
        if _is_exact(x, 1.0):
            term = y
        elif _is_exact(y, 1.0):
            term = x
        else:
            term = x * y
        total = term if _is_exact(total, 0.0) else total + term
    return total


def _is_exact(value, number: float) -> bool:
    return isinstance(value, (float, int)) and value == number


class ObjectBackend(ScalarBackend):
    name = "object"


class NumpyBackend(ScalarBackend):
    name = "numpy"

    def constant(self, values) -> np.ndarray:
        return np.asarray(values, dtype=float)

    def matrix(self, rows):
        return np.array(rows, dtype=float)

    def matmul(self, a, b):
        return a @ b


class JaxBackend(ScalarBackend):
    name = "jax"

    def sin(self, x):
        return jnp.sin(x)

    def cos(self, x):
        return jnp.cos(x)

    def sqrt(self, x):
        # Gradient is 0 instead of NaN where x == 0 (residual at a solution)
        positive = x > 0
        return jnp.where(positive, jnp.sqrt(jnp.where(positive, x, 1.0)), 0.0)

    def constant(self, values):
        return jnp.asarray(values)

    def matrix(self, rows):
        return jnp.array(rows)

    def matmul(self, a, b):
        return a @ b


class SympyBackend(ScalarBackend):
    name = "sympy"

    def sin(self, x):
        return sympy.sin(x)

    def cos(self, x):
        return sympy.cos(x)

    def sqrt(self, x):
        return sympy.sqrt(x)

    def constant(self, values) -> np.ndarray:
        # cos(pi/2) style round-off would otherwise leak into expressions
        values = np.asarray(values, dtype=float)
        values = np.where(np.abs(values) < 1e-12, 0.0, values)
        return np.array(values.tolist(), dtype=object)


class IntervalBackend(ScalarBackend):
    name = "interval"

    def sin(self, x):
        return mpmath.iv.sin(x)

    def cos(self, x):
        return mpmath.iv.cos(x)

    def sqrt(self, x):
        return mpmath.iv.sqrt(x)


NUMPY = NumpyBackend()
JAX = JaxBackend()
SYMPY = SympyBackend()
INTERVAL = IntervalBackend()
OBJECT = ObjectBackend()


def backend_for_scalar(value) -> ScalarBackend:
    """Pick the backend for a single scalar value."""
    if isinstance(value, jax.Array):
        return JAX
    if isinstance(value, sympy.Basic):
        return SYMPY
    if isinstance(value, mpmath.iv.mpf):
        return INTERVAL
    if isinstance(value, numbers.Real):
        return NUMPY
    return OBJECT


def resolve(configuration) -> Tuple[Hashable, ScalarBackend]:
    """Return ``(scalar type key, backend)`` for a configuration vector.

    Arrays are keyed by their own type (or dtype for NumPy), other sequences
    by the type of their first entry.
    """
    if isinstance(configuration, jax.Array):
        return type(configuration), JAX
    if isinstance(configuration, np.ndarray) and configuration.dtype != object:
        return configuration.dtype.type, NUMPY
    if len(configuration) == 0:
        return float, NUMPY
    sample = configuration[0]
    return type(sample), backend_for_scalar(sample)
