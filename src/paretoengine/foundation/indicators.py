"""
Quality indicators for approximation sets.

All functions assume minimization; map fitness with
``ObjectiveSpace.to_minimization`` before calling them.

The two-objective hypervolume is a plain sweep; higher dimensions, GD, IGD
and the additive epsilon come from MooCore. Spacing and two-set coverage
are computed here.
"""

from __future__ import annotations

from typing import Sequence

import moocore
import numpy as np

from .kernel import dominance_matrix


def _as_front(F: np.ndarray | Sequence[Sequence[float]]) -> np.ndarray:
    arr = np.asarray(F, dtype=float)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    if arr.ndim != 2:
        raise ValueError("Expected a 2-D objective matrix.")
    return arr


def nondominated_mask(F: np.ndarray) -> np.ndarray:
    """Boolean mask of rows not dominated by any other row."""
    F = _as_front(F)
    if F.shape[0] == 0:
        return np.zeros(0, dtype=bool)
    return ~np.any(dominance_matrix(F), axis=0)


def _hv_2d(pts: np.ndarray, ref: np.ndarray) -> float:
    # Sweep from small f1 to large f1 keeping a strictly decreasing f2 staircase.
    order = np.lexsort((pts[:, 1], pts[:, 0]))
    hv = 0.0
    best_f2 = ref[1]
    stair: list[tuple[float, float]] = []
    for x, y in pts[order]:
        if y < best_f2:
            stair.append((x, y))
            best_f2 = y
    prev_x = ref[0]
    for x, y in reversed(stair):
        hv += (prev_x - x) * (ref[1] - y)
        prev_x = x
    return float(hv)


def hypervolume(F: np.ndarray | Sequence[Sequence[float]], ref_point: Sequence[float]) -> float:
    """
    Exact hypervolume dominated by ``F`` and bounded by ``ref_point``.

    Points that are not strictly better than the reference point in every
    objective contribute nothing. Two objectives use the sweep above; more
    objectives are delegated to ``moocore.hypervolume``.
    """
    F = _as_front(F)
    ref = np.asarray(ref_point, dtype=float)
    if F.shape[0] == 0:
        return 0.0
    if ref.shape[0] != F.shape[1]:
        raise ValueError("ref_point length must match the number of objectives.")
    if not np.isfinite(F).all() or not np.isfinite(ref).all():
        raise ValueError("F and ref_point must contain finite numbers")
    pts = F[np.all(F < ref, axis=1)]
    if pts.shape[0] == 0:
        return 0.0
    if pts.shape[1] == 1:
        return float(ref[0] - pts[:, 0].min())
    if pts.shape[1] == 2:
        return _hv_2d(pts, ref)
    return float(moocore.hypervolume(pts, ref=ref))


def spacing(F: np.ndarray | Sequence[Sequence[float]]) -> float:
    """Schott's spacing: standard deviation of Manhattan nearest-neighbour distances (0 is evenly spread)."""
    F = _as_front(F)
    n = F.shape[0]
    if n < 2:
        return 0.0
    dist = np.sum(np.abs(F[:, None, :] - F[None, :, :]), axis=2)
    np.fill_diagonal(dist, np.inf)
    d = dist.min(axis=1)
    return float(np.sqrt(np.sum((d.mean() - d) ** 2) / (n - 1)))


def _fronts(F, reference_front, name: str) -> tuple[np.ndarray, np.ndarray]:
    A = _as_front(F)
    R = _as_front(reference_front)
    if A.shape[0] == 0 or R.shape[0] == 0:
        raise ValueError(f"{name} needs non-empty fronts.")
    if A.shape[1] != R.shape[1]:
        raise ValueError(f"{name}: fronts have {A.shape[1]} and {R.shape[1]} objectives.")
    return A, R


def generational_distance(F: np.ndarray | Sequence[Sequence[float]], reference_front: np.ndarray) -> float:
    """GD: mean Euclidean distance from each point of ``F`` to its nearest reference point."""
    A, R = _fronts(F, reference_front, "generational_distance")
    # IGD measured from F onto R is GD of F against R.
    return float(moocore.igd(R, ref=A))


def inverted_generational_distance(F: np.ndarray | Sequence[Sequence[float]], reference_front: np.ndarray) -> float:
    """IGD: mean distance from each reference point to its nearest point of ``F``."""
    A, R = _fronts(F, reference_front, "inverted_generational_distance")
    return float(moocore.igd(A, ref=R))


def additive_epsilon(F: np.ndarray | Sequence[Sequence[float]], reference_front: np.ndarray) -> float:
    """Smallest shift eps such that F - eps weakly dominates every reference point."""
    A, R = _fronts(F, reference_front, "additive_epsilon")
    return float(moocore.epsilon_additive(A, ref=R))


def coverage(A: np.ndarray | Sequence[Sequence[float]], B: np.ndarray | Sequence[Sequence[float]]) -> float:
    """Two-set coverage C(A, B): fraction of B weakly dominated by at least one point of A."""
    A = _as_front(A)
    B = _as_front(B)
    if B.shape[0] == 0:
        return 0.0
    if A.shape[0] == 0:
        return 0.0
    weakly = np.all(A[:, None, :] <= B[None, :, :], axis=2)
    return float(np.count_nonzero(np.any(weakly, axis=0)) / B.shape[0])


__all__ = [
    "nondominated_mask",
    "hypervolume",
    "spacing",
    "generational_distance",
    "inverted_generational_distance",
    "additive_epsilon",
    "coverage",
]
