"""
Scalarizing (aggregation) functions for decomposition.

Every function takes objective values already mapped into minimization space
and returns one value per row, smaller being better for the sub-problem.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

import numpy as np

from paretoengine.exceptions import InvalidStrategyError

Scalarizer = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


class Aggregation(str, Enum):
    TCHEBYCHEFF = "tchebycheff"
    WEIGHTED_SUM = "weighted_sum"
    PBI = "pbi"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "Aggregation | str") -> "Aggregation":
        if isinstance(value, Aggregation):
            return value
        key = str(value).strip().lower().replace("-", "_")
        if key in {"tchebycheff", "tchebychef", "tschebyscheff", "te"}:
            return cls.TCHEBYCHEFF
        if key in {"weighted_sum", "weightedsum", "ws"}:
            return cls.WEIGHTED_SUM
        if key in {"pbi", "penalty_boundary_intersection"}:
            return cls.PBI
        raise InvalidStrategyError(str(value), [a.value for a in cls], kind="aggregation")


def tchebycheff(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray) -> np.ndarray:
    """Weighted Tchebycheff: max(w * |f - z*|)."""
    diff = np.abs(fvals - ideal)
    return np.max(weights * diff, axis=-1)


def weighted_sum(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray) -> np.ndarray:
    """Weighted sum of the distances to the ideal point: sum(w * (f - z*))."""
    return np.sum(weights * (fvals - ideal), axis=-1)


def pbi(fvals: np.ndarray, weights: np.ndarray, ideal: np.ndarray, theta: float = 5.0) -> np.ndarray:
    """Penalty boundary intersection.

    Parameters
    ----------
    fvals : np.ndarray
        Objective values, shape (N, n_obj) or (n_obj,).
    weights : np.ndarray
        Weight vectors broadcastable against ``fvals``.
    ideal : np.ndarray
        Ideal point, shape (n_obj,).
    theta : float
        Penalty on the distance from the weight direction (default 5.0).

    Returns
    -------
    np.ndarray
        ``d1 + theta * d2`` where d1 is the projection length along the weight
        direction and d2 the perpendicular distance to it.
    """
    diff = fvals - ideal
    norm_w = np.linalg.norm(weights, axis=-1, keepdims=True)
    norm_w = np.where(norm_w > 0, norm_w, 1.0)
    w_unit = weights / norm_w
    d1 = np.abs(np.sum(diff * w_unit, axis=-1))
    proj = d1[..., None] * w_unit
    d2 = np.linalg.norm(diff - proj, axis=-1)
    return d1 + theta * d2


def build_scalarizer(kind: Aggregation | str, theta: float = 5.0) -> Scalarizer:
    """Resolve an aggregation name once, at setup time."""
    kind = Aggregation.parse(kind)
    if kind is Aggregation.TCHEBYCHEFF:
        return tchebycheff
    if kind is Aggregation.WEIGHTED_SUM:
        return weighted_sum
    theta = float(theta)
    return lambda fvals, weights, ideal: pbi(fvals, weights, ideal, theta)


__all__ = ["Aggregation", "Scalarizer", "tchebycheff", "weighted_sum", "pbi", "build_scalarizer"]
