"""
Density / diversity estimators.

Two interchangeable metrics with opposite orientation:

- crowding distance: larger means less crowded (NSGA-II tie-breaker),
- k-th nearest neighbour density: smaller means less crowded (SPEA2).
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

import numpy as np

from paretoengine.exceptions import InvalidStrategyError

from .individual import Individual, objective_matrix
from .kernel import crowding_distance, knn_density
from .objectives import ObjectiveSpace


class DensityKind(str, Enum):
    CROWDING = "crowding"
    KNN = "knn"

    @classmethod
    def parse(cls, value: "DensityKind | str") -> "DensityKind":
        if isinstance(value, DensityKind):
            return value
        key = str(value).strip().lower()
        for kind in cls:
            if kind.value == key:
                return kind
        raise InvalidStrategyError(str(value), [k.value for k in cls], kind="density estimator")


def estimate_density(kind: DensityKind | str, F: np.ndarray, k: int | None = None) -> np.ndarray:
    """Density of every row of a minimization-space matrix according to ``kind``."""
    kind = DensityKind.parse(kind)
    if kind is DensityKind.CROWDING:
        return crowding_distance(F)
    return knn_density(F, k)


def diversity_contribution(kind: DensityKind | str, F: np.ndarray, k: int | None = None) -> np.ndarray:
    """
    Density re-oriented so that larger always means "contributes more spread".

    Archives truncate by removing the smallest contribution regardless of
    which estimator produced it.
    """
    kind = DensityKind.parse(kind)
    values = estimate_density(kind, F, k)
    if kind is DensityKind.KNN:
        return -values
    return values


def assign_crowding_distance(front: Sequence[Individual], space: ObjectiveSpace) -> np.ndarray:
    """Write the crowding distance of a single front into each individual's ``density``."""
    if not front:
        return np.empty(0, dtype=float)
    F = space.to_minimization(objective_matrix(front, space.n_obj))
    d = crowding_distance(F)
    for ind, value in zip(front, d):
        ind.density = float(value)
    return d


__all__ = [
    "DensityKind",
    "estimate_density",
    "diversity_contribution",
    "assign_crowding_distance",
]
