"""
Das-Dennis weight vectors for decomposition.

A lattice with ``H`` divisions over ``M`` objectives holds every vector whose
components are multiples of ``1 / H`` summing to one; there are
``comb(H + M - 1, M - 1)`` of them.
"""

from __future__ import annotations

from itertools import combinations
from math import comb
from typing import Optional

import numpy as np

from paretoengine.exceptions import ConfigurationError


def lattice_size(n_obj: int, divisions: int) -> int:
    """Number of points on the simplex lattice with ``divisions`` steps."""
    if divisions < 1:
        raise ConfigurationError("divisions must be >= 1")
    return comb(divisions + n_obj - 1, n_obj - 1)


def lattice_counts(n_obj: int, divisions: int) -> np.ndarray:
    """
    Integer lattice coordinates, one row per point, each row summing to ``divisions``.

    Rows are enumerated as stars and bars: choosing the positions of the
    ``n_obj - 1`` bars among ``divisions + n_obj - 1`` slots fixes one point.
    Rows come out with the first coordinate ascending, so a two-objective
    lattice runs from ``(0, H)`` to ``(H, 0)``.
    """
    slots = divisions + n_obj - 1
    rows = []
    for bars in combinations(range(slots), n_obj - 1):
        edges = np.array((-1,) + bars + (slots,))
        rows.append(np.diff(edges) - 1)
    return np.asarray(rows, dtype=int)


def _min_divisions(pop_size: int, n_obj: int) -> int:
    divisions = 1
    while lattice_size(n_obj, divisions) < pop_size:
        divisions += 1
    return divisions


def _spread_subset(counts: np.ndarray, size: int) -> np.ndarray:
    """
    Greedy maximin pick of ``size`` rows: the axis vectors first, then the
    row farthest from everything chosen so far. Ties go to the lowest row.
    """
    divisions = int(counts[0].sum())
    chosen = [int(i) for i in np.flatnonzero(counts.max(axis=1) == divisions)][:size]
    points = counts.astype(float)
    gap = np.full(points.shape[0], np.inf)
    for c in chosen:
        gap = np.minimum(gap, np.linalg.norm(points - points[c], axis=1))
    while len(chosen) < size:
        nxt = int(np.argmax(gap))
        chosen.append(nxt)
        gap = np.minimum(gap, np.linalg.norm(points - points[nxt], axis=1))
    return np.sort(np.asarray(chosen, dtype=int))


def weight_vectors(pop_size: int, n_obj: int, divisions: Optional[int] = None) -> np.ndarray:
    """
    Simplex-lattice (Das-Dennis) weight vectors, one row per sub-problem.

    With ``divisions=None`` the smallest lattice holding ``pop_size`` points is
    used; an explicit ``divisions`` that is too coarse is raised to it. When
    the lattice has more points than ``pop_size``, a maximin subsample is
    returned that always keeps the unit axis vectors, so the extremes of the
    front stay covered.
    """
    if pop_size < 1:
        raise ConfigurationError(f"pop_size must be >= 1 to build weight vectors, got {pop_size}.")
    if n_obj < 2:
        # Single objective: every sub-problem shares the same direction.
        return np.ones((pop_size, 1), dtype=float)
    needed = _min_divisions(pop_size, n_obj)
    if divisions is None:
        divisions = needed
    elif divisions < 1:
        raise ConfigurationError(f"divisions must be >= 1, got {divisions}.")
    else:
        divisions = max(divisions, needed)

    counts = lattice_counts(n_obj, divisions)
    if counts.shape[0] > pop_size:
        counts = counts[_spread_subset(counts, pop_size)]
    weights = counts.astype(float) / divisions
    # Keep rows summing to exactly 1 after the division.
    weights /= weights.sum(axis=1, keepdims=True)
    return weights


def validate_weights(weights: np.ndarray, n_obj: int) -> np.ndarray:
    """Check a user supplied weight matrix: 2-D, ``n_obj`` columns, non-negative, rows summing to 1."""
    arr = np.atleast_2d(np.asarray(weights, dtype=float))
    if arr.ndim != 2:
        raise ConfigurationError("Weight matrix must be 2D.")
    if arr.shape[1] != n_obj:
        raise ConfigurationError(f"Expected weight vectors with {n_obj} columns, got {arr.shape[1]}.")
    if np.any(arr < 0.0):
        raise ConfigurationError("Weight vectors must be non-negative.")
    if np.any(np.abs(arr.sum(axis=1) - 1.0) > 1e-6):
        raise ConfigurationError("Each weight vector must sum to 1.")
    return arr


__all__ = ["weight_vectors", "lattice_size", "lattice_counts", "validate_weights"]
