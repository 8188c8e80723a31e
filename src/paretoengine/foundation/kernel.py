"""Vectorized NumPy primitives shared by ranking, density and archives.

Performance-sensitive: keep operations vectorized and avoid Python loops where possible.
Assumes F is float64 of shape (N, M) and already mapped into minimization space.
"""

from __future__ import annotations

import numpy as np


def dominance_matrix(F: np.ndarray, cv: np.ndarray | None = None) -> np.ndarray:
    """
    Boolean matrix D with D[i, j] True iff row i dominates row j.

    Without ``cv`` this is plain Pareto dominance. With a constraint violation
    per row, a lower violation dominates outright (so every feasible row
    dominates every infeasible one) and rows with equal violation fall back to
    Pareto dominance. Identical rows never dominate each other, so the
    diagonal is always False.
    """
    F = np.asarray(F, dtype=float)
    if F.shape[0] == 0:
        return np.zeros((0, 0), dtype=bool)
    less_equal = F[:, None, :] <= F[None, :, :]
    strictly_less = F[:, None, :] < F[None, :, :]
    pareto = np.logical_and(np.all(less_equal, axis=2), np.any(strictly_less, axis=2))
    if cv is None:
        return pareto
    cv = np.asarray(cv, dtype=float)
    if not np.any(cv > 0.0):
        return pareto
    lower = cv[:, None] < cv[None, :]
    same = cv[:, None] == cv[None, :]
    return lower | (same & pareto)


def fast_non_dominated_sort(F: np.ndarray, cv: np.ndarray | None = None) -> tuple[list[np.ndarray], np.ndarray]:
    """
    Classic O(N^2) fast non-dominated sort.

    Args:
        F: objective matrix (N, M), float64, minimization.
        cv: optional constraint violation per row, see ``dominance_matrix``.
    Returns:
      - fronts: list of index arrays per front (front 0 is the non-dominated set)
      - rank: array with the 0-based front index for each row
    """
    N = F.shape[0]
    if N == 0:
        return [], np.empty(0, dtype=int)

    dom = dominance_matrix(F, cv)
    dominated_count = dom.sum(axis=0).astype(np.int64)
    rank = np.full(N, -1, dtype=int)
    fronts: list[np.ndarray] = []

    current = np.flatnonzero(dominated_count == 0)
    level = 0
    while current.size > 0:
        fronts.append(current)
        rank[current] = level
        dominated_count -= dom[current].sum(axis=0)
        # Retire the front so it is never counted again.
        dominated_count[current] = -1
        dom[current] = False
        level += 1
        current = np.flatnonzero(dominated_count == 0)

    return fronts, rank


def crowding_distance(F: np.ndarray) -> np.ndarray:
    """
    Standard crowding distance for a single front, higher is better.

    Boundary rows of every objective get ``inf``; inner rows accumulate the
    gap between their sorted neighbours divided by the front span. An
    objective whose span is zero contributes nothing.
    """
    F = np.asarray(F, dtype=float)
    n = F.shape[0]
    if n == 0:
        return np.empty(0, dtype=float)
    if n <= 2:
        return np.full(n, np.inf)

    d = np.zeros(n, dtype=float)
    for m in range(F.shape[1]):
        order = np.argsort(F[:, m], kind="mergesort")
        sorted_vals = F[order, m]

        d[order[0]] = np.inf
        d[order[-1]] = np.inf

        span = sorted_vals[-1] - sorted_vals[0]
        if span <= 0.0:
            continue

        contrib = (sorted_vals[2:] - sorted_vals[:-2]) / span
        d[order[1:-1]] += contrib

    return d


def pairwise_distances(F: np.ndarray) -> np.ndarray:
    """Euclidean distance matrix in objective space."""
    F = np.asarray(F, dtype=float)
    if F.shape[0] == 0:
        return np.zeros((0, 0), dtype=float)
    diff = F[:, None, :] - F[None, :, :]
    return np.sqrt(np.sum(diff * diff, axis=2))


def knn_density(F: np.ndarray, k: int | None = None, dist: np.ndarray | None = None) -> np.ndarray:
    """
    SPEA2 density ``1 / (sigma_k + 2)`` from the k-th nearest neighbour distance.

    ``k`` defaults to sqrt(N) and is clamped to ``N - 1`` so small sets never
    index past the available neighbours. A lone row has density 0.
    """
    n = F.shape[0]
    if n == 0:
        return np.empty(0, dtype=float)
    if n == 1:
        return np.zeros(1, dtype=float)

    if k is None:
        k = max(1, int(np.sqrt(n)))
    k = max(1, min(int(k), n - 1))

    if dist is None:
        dist = pairwise_distances(F)
    # Column 0 of each sorted row is the distance to itself.
    sorted_dists = np.sort(dist, axis=1)
    sigma_k = sorted_dists[:, k]
    return 1.0 / (sigma_k + 2.0)


__all__ = [
    "dominance_matrix",
    "fast_non_dominated_sort",
    "crowding_distance",
    "pairwise_distances",
    "knn_density",
]
