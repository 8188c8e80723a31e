"""
Decomposition engine: weight vectors, neighbourhoods and the ideal point.

Objective values entering the engine are in original units; the engine maps
them into minimization space itself so that the ideal point and every
scalarized value follow a single "smaller is better" convention.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from paretoengine.exceptions import ConfigurationError, InvalidStrategyError
from paretoengine.foundation.objectives import ObjectiveSpace

from .scalarizing import Aggregation, build_scalarizer
from .weight_vectors import validate_weights

_logger = logging.getLogger(__name__)

NEIGHBOR_METRICS = ("angular", "euclidean")


def compute_neighbors(weights: np.ndarray, t: int, metric: str = "angular") -> np.ndarray:
    """
    Indices of the ``t`` closest weight vectors for every sub-problem.

    Row ``i`` always starts with ``i`` itself; the rest follow by increasing
    angle (or Euclidean distance) between weight vectors, ties resolved by
    index.
    """
    weights = np.asarray(weights, dtype=float)
    n = weights.shape[0]
    if not 1 <= t <= n:
        raise ConfigurationError(f"Neighbourhood size must lie in [1, {n}], got {t}.")
    if metric == "angular":
        norms = np.linalg.norm(weights, axis=1)
        norms = np.where(norms > 0, norms, 1.0)
        unit = weights / norms[:, None]
        cos = np.clip(unit @ unit.T, -1.0, 1.0)
        dist = np.arccos(cos)
    elif metric == "euclidean":
        dist = np.linalg.norm(weights[:, None, :] - weights[None, :, :], axis=2)
    else:
        raise InvalidStrategyError(metric, list(NEIGHBOR_METRICS), kind="neighbourhood metric")
    dist = dist.copy()
    np.fill_diagonal(dist, -np.inf)
    order = np.argsort(dist, axis=1, kind="stable")
    neighbors = np.ascontiguousarray(order[:, :t])
    neighbors.setflags(write=False)
    return neighbors


class DecompositionEngine:
    """
    Sub-problem table for MOEA/D.

    Parameters
    ----------
    weights : np.ndarray
        One weight vector per sub-problem, shape (n_subproblems, n_obj).
    t : int
        Neighbourhood size, self included. Must be smaller than the number of
        sub-problems.
    aggregation : Aggregation or str
        Scalarizing function used to compare solutions on a sub-problem.
    space : ObjectiveSpace
        Objective directions.
    metric : str
        ``"angular"`` (default) or ``"euclidean"`` distance between weights.
    theta : float
        PBI penalty, ignored by the other aggregations.
    """

    def __init__(
        self,
        weights: np.ndarray,
        t: int,
        aggregation: Aggregation | str,
        space: ObjectiveSpace,
        metric: str = "angular",
        theta: float = 5.0,
    ) -> None:
        weights = validate_weights(weights, space.n_obj)
        n = weights.shape[0]
        if not 1 <= t < n:
            raise ConfigurationError(
                f"Neighbourhood size t={t} must satisfy 1 <= t < {n} (number of sub-problems).",
                suggestion="Lower t or add sub-problems",
                details={"t": t, "n_subproblems": n},
            )
        weights = weights.copy()
        weights.setflags(write=False)
        self.weights = weights
        self.t = int(t)
        self.space = space
        self.aggregation = Aggregation.parse(aggregation)
        self._scalarize = build_scalarizer(self.aggregation, theta)
        self.neighbors = compute_neighbors(weights, self.t, metric)
        self._ideal = np.full(space.n_obj, np.inf)

    @property
    def n_subproblems(self) -> int:
        return int(self.weights.shape[0])

    @property
    def ideal(self) -> np.ndarray:
        """Ideal point in minimization space (``inf`` until an objective has been seen)."""
        out = self._ideal.copy()
        out.setflags(write=False)
        return out

    @property
    def ideal_point(self) -> np.ndarray:
        """Ideal point in original objective units."""
        return self.space.from_minimization(self._ideal)

    def update_ideal(self, fitness: Sequence[float] | np.ndarray) -> bool:
        """
        Fold one fitness vector, or a matrix of them, into the ideal point.

        Returns True when at least one component improved. Components never
        regress.
        """
        F = np.atleast_2d(self.space.to_minimization(fitness))
        candidate = np.minimum(self._ideal, F.min(axis=0))
        improved = bool(np.any(candidate < self._ideal))
        if improved:
            self._ideal = candidate
            _logger.debug("Ideal point moved to %s.", self.ideal_point)
        return improved

    def scalarize(self, fitness: Sequence[float] | np.ndarray, index: int) -> float:
        """Value of ``fitness`` on sub-problem ``index`` (smaller is better)."""
        f = self.space.to_minimization(fitness)
        return float(self._scalarize(f, self.weights[index], self._ideal))

    def scalarize_many(self, F: np.ndarray, indices: Sequence[int] | np.ndarray) -> np.ndarray:
        """Row ``r`` of ``F`` scalarized on sub-problem ``indices[r]``."""
        Fm = np.atleast_2d(self.space.to_minimization(F))
        idx = np.asarray(indices, dtype=int)
        return np.asarray(self._scalarize(Fm, self.weights[idx], self._ideal), dtype=float)

    def neighborhood(self, index: int) -> np.ndarray:
        return self.neighbors[index]

    def __repr__(self) -> str:
        return (
            f"DecompositionEngine(n_subproblems={self.n_subproblems}, t={self.t}, "
            f"aggregation={self.aggregation.value})"
        )


__all__ = ["DecompositionEngine", "compute_neighbors", "NEIGHBOR_METRICS"]
