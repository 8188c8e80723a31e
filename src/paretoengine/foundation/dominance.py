"""
Pareto dominance comparator.

Dominance is a partial order: it is only meaningful pairwise and no global
ordering is implied. Values are compared exactly, callers needing a tolerance
must round or quantize their fitness upstream.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

from .individual import Individual
from .objectives import Direction, ObjectiveSpace


class Dominance(Enum):
    FIRST_DOMINATES = 1
    SECOND_DOMINATES = -1
    NON_DOMINATED = 0
    EQUAL = 2


def _signs(directions: Sequence[Direction | str] | np.ndarray | None, n_obj: int) -> np.ndarray:
    if directions is None:
        return np.ones(n_obj, dtype=float)
    if isinstance(directions, np.ndarray) and directions.dtype.kind == "f":
        signs = directions
    else:
        signs = np.array([1.0 if Direction.parse(d) is Direction.MINIMIZE else -1.0 for d in directions])
    if signs.shape[0] != n_obj:
        raise ValueError(f"Got {signs.shape[0]} directions for {n_obj} objectives.")
    return signs


def compare(
    a: Sequence[float] | np.ndarray,
    b: Sequence[float] | np.ndarray,
    directions: Sequence[Direction | str] | np.ndarray | None = None,
) -> Dominance:
    """
    Compare two fitness vectors.

    Parameters
    ----------
    a, b : array-like
        Fitness vectors of equal length.
    directions : sequence of Direction, sign array, or None
        Per-objective direction; None means every objective is minimized.
        An ``ObjectiveSpace.signs`` array is accepted as is.

    Returns
    -------
    Dominance
        ``EQUAL`` for identical vectors, never ``NON_DOMINATED``.
    """
    fa = np.asarray(a, dtype=float)
    fb = np.asarray(b, dtype=float)
    if fa.shape != fb.shape or fa.ndim != 1:
        raise ValueError(f"Fitness vectors must be 1-D and of equal length, got {fa.shape} and {fb.shape}.")
    signs = _signs(directions, fa.shape[0])
    fa = fa * signs
    fb = fb * signs

    a_better = bool(np.any(fa < fb))
    b_better = bool(np.any(fb < fa))
    if a_better and not b_better:
        return Dominance.FIRST_DOMINATES
    if b_better and not a_better:
        return Dominance.SECOND_DOMINATES
    if not a_better and not b_better:
        return Dominance.EQUAL
    return Dominance.NON_DOMINATED


def constrained_compare(a: Individual, b: Individual, space: ObjectiveSpace | None = None) -> Dominance:
    """
    Compare two evaluated individuals under constrained dominance.

    The lower constraint violation wins outright, so a feasible individual
    dominates every infeasible one. Equal violations, including two feasible
    individuals, fall back to ``compare`` on the fitness vectors.
    """
    if a.fitness is None or b.fitness is None:
        raise ValueError("Both individuals must be evaluated before they can be compared.")
    if a.violation < b.violation:
        return Dominance.FIRST_DOMINATES
    if b.violation < a.violation:
        return Dominance.SECOND_DOMINATES
    return compare(a.fitness, b.fitness, None if space is None else space.signs)


def dominates(
    a: Sequence[float] | np.ndarray,
    b: Sequence[float] | np.ndarray,
    directions: Sequence[Direction | str] | np.ndarray | None = None,
) -> bool:
    """True iff ``a`` Pareto-dominates ``b``."""
    return compare(a, b, directions) is Dominance.FIRST_DOMINATES


__all__ = ["Dominance", "compare", "constrained_compare", "dominates"]
