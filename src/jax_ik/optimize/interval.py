"""Global minimisation by interval branch-and-bound.

Moore-Skelboe search over a box of joint positions. Residuals are evaluated
with mpmath interval arithmetic, so the lower bound of a box's value is a
guaranteed lower bound of the residual anywhere in that box:

1. keep boxes in a priority queue ordered by their lower bound;
2. pop the most promising box, drop it if its lower bound is above the best
   value known to be attainable;
3. tighten that best value with a rigorous evaluation at the box midpoint;
4. boxes narrower than ``tol`` become minimiser candidates, others are
   bisected along their widest side and pushed back.

``[lower, upper]`` of the result always encloses the global minimum over the
initial box, even when the iteration budget runs out first.
"""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import mpmath
import numpy as np

logger = logging.getLogger(__name__)

Box = Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class GlobalResult:
    """Outcome of a global solve.

    Attributes:
        lower: guaranteed lower bound of the global minimum
        upper: residual value attained at ``best_point`` (rounded up)
        minimizers: boxes that may contain a global minimiser
        best_point: configuration achieving ``upper``
        iterations: boxes processed
        converged: False when the iteration budget stopped the search
    """
    lower: float
    upper: float
    minimizers: List[Box]
    best_point: np.ndarray
    iterations: int
    converged: bool

    def contains(self, q: Sequence[float], atol: float = 1e-9) -> bool:
        """True if configuration ``q`` lies in one of the minimiser boxes."""
        q = np.asarray(q, dtype=float)
        return any(
            all(lo - atol <= x <= hi + atol for x, (lo, hi) in zip(q, box))
            for box in self.minimizers
        )


def interval_bounds(value) -> Tuple[float, float]:
    """Outward-rounded float endpoints of an mpmath interval (or a float)."""
    if isinstance(value, mpmath.iv.mpf):
        lo, hi = float(value.a), float(value.b)
        if value.a < lo:
            lo = math.nextafter(lo, -math.inf)
        if value.b > hi:
            hi = math.nextafter(hi, math.inf)
        return lo, hi
    value = float(value)
    return value, value


def _width(box: Box) -> float:
    return max(hi - lo for lo, hi in box)


def _midpoint(box: Box) -> List[float]:
    return [0.5 * (lo + hi) for lo, hi in box]


def _bisect(box: Box) -> Tuple[Box, Box]:
    k = max(range(len(box)), key=lambda i: box[i][1] - box[i][0])
    lo, hi = box[k]
    mid = 0.5 * (lo + hi)
    left = box[:k] + ((lo, mid),) + box[k + 1:]
    right = box[:k] + ((mid, hi),) + box[k + 1:]
    return left, right


def solve_global(
    residual: Callable,
    bounds: Sequence[Tuple[float, float]],
    *,
    tol: float = 1e-2,
    max_iterations: int = 100_000,
) -> GlobalResult:
    """Enclose the global minimum of ``residual`` over the box ``bounds``.

    Args:
        residual: callable built by ``jax_ik.residual.evaluate``
        bounds: finite (lower, upper) per degree of freedom
        tol: boxes narrower than this are not split further
        max_iterations: cap on processed boxes

    Returns:
        GlobalResult
    """
    box: Box = tuple((float(lo), float(hi)) for lo, hi in bounds)
    for lo, hi in box:
        if not (math.isfinite(lo) and math.isfinite(hi)) or lo > hi:
            raise ValueError(f"Interval bounds must be finite and ordered, got {bounds}")

    def lower_bound(b: Box) -> float:
        return interval_bounds(residual([mpmath.iv.mpf([lo, hi]) for lo, hi in b]))[0]

    def upper_at(point: List[float]) -> float:
        return interval_bounds(residual([mpmath.iv.mpf(x) for x in point]))[1]

    counter = itertools.count()
    queue = [(lower_bound(box), next(counter), box)]
    candidates: List[Tuple[float, Box]] = []
    best_point = _midpoint(box)
    best_value = math.inf
    iterations = 0

    while queue and iterations < max_iterations:
        box_lower, _, current = heapq.heappop(queue)
        iterations += 1
        if box_lower > best_value:
            continue

        mid = _midpoint(current)
        mid_value = upper_at(mid)
        if mid_value < best_value:
            best_value, best_point = mid_value, mid

        if _width(current) < tol:
            candidates.append((box_lower, current))
            continue

        for half in _bisect(current):
            half_lower = lower_bound(half)
            if half_lower <= best_value:
                heapq.heappush(queue, (half_lower, next(counter), half))

        if iterations % 1000 == 0:
            logger.debug("%d boxes processed, %d queued, best value %.3e",
                         iterations, len(queue), best_value)

    converged = not queue
    if not converged:
        logger.warning("Interval search stopped after %d boxes with %d still queued",
                       iterations, len(queue))
        candidates.extend((lo, b) for lo, _, b in queue)

    kept = [(lo, b) for lo, b in candidates if lo <= best_value]
    lower = min((lo for lo, _ in kept), default=best_value)
    logger.info("Global minimum enclosed in [%.3e, %.3e] after %d boxes (%d candidate boxes)",
                lower, best_value, iterations, len(kept))
    return GlobalResult(
        lower=lower,
        upper=best_value,
        minimizers=[b for _, b in kept],
        best_point=np.asarray(best_point, dtype=float),
        iterations=iterations,
        converged=converged,
    )
