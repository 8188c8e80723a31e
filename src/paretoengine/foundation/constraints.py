"""
Constraint violation helpers.

Constraint values follow the convention g(x) <= 0 is satisfied. The
aggregate violation of a solution is the sum of the positive parts, so a
feasible solution has violation 0.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .individual import Individual


def compute_violation(G: np.ndarray | None, *, n: int | None = None) -> np.ndarray:
    """Sum of positive parts per row of ``G`` (shape (N, n_constr)); zeros of length ``n`` when ``G`` is None."""
    if G is None:
        return np.zeros(n or 0, dtype=float)
    G = np.asarray(G, dtype=float)
    if G.ndim != 2:
        raise ValueError("G must be a 2D array of shape (n_points, n_constr).")
    return np.asarray(np.sum(np.maximum(G, 0.0), axis=1), dtype=float)


def violation_vector(individuals: Sequence[Individual]) -> np.ndarray | None:
    """Violation of every individual, or None when all of them are feasible."""
    cv = np.array([ind.violation for ind in individuals], dtype=float)
    if not np.any(cv > 0.0):
        return None
    return cv


__all__ = ["compute_violation", "violation_vector"]
