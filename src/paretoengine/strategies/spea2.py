# strategies/spea2.py
"""
SPEA2: strength Pareto strategy with a fixed-size breeding archive.

Each generation the union of population, offspring and archive is scored:

- strength S(i): number of members i dominates,
- raw fitness R(i): sum of the strengths of i's dominators,
- density D(i): 1 / (sigma_k + 2) from the k-th nearest neighbour,
- fitness F(i) = R(i) + D(i); non-dominated members have F < 1.

The archive keeps every non-dominated member when they fit, fills with the
best dominated ones otherwise, and is truncated by k-th nearest neighbour
density when there are too many. Parents are drawn from the archive and the
offspring become the next population. Dominance is constrained, so feasible
members always outrank infeasible ones.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from paretoengine.config.spea2 import SPEA2ConfigData
from paretoengine.foundation.constraints import violation_vector
from paretoengine.foundation.density import DensityKind, estimate_density
from paretoengine.foundation.individual import Individual, objective_matrix, unique_members
from paretoengine.foundation.kernel import dominance_matrix
from paretoengine.foundation.objectives import ObjectiveSpace
from paretoengine.foundation.random import RandomSource
from paretoengine.foundation.ranking import first_front

from .base import Mating, Strategy, matings_needed
from .selection import TournamentSelection, strength_comparison

_logger = logging.getLogger(__name__)


def _default_k(n: int) -> int:
    return max(1, int(np.sqrt(n)))


def strength_fitness(
    F: np.ndarray, k: int | None = None, cv: np.ndarray | None = None
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Compute SPEA2 fitness for a minimization-space matrix.

    Parameters
    ----------
    F : np.ndarray
        Objective values, shape (N, n_obj).
    k : int | None
        Neighbour index for the density term. Defaults to sqrt(N).
    cv : np.ndarray | None
        Constraint violation per row; switches strength and raw fitness to
        constrained dominance.

    Returns
    -------
    tuple[np.ndarray, np.ndarray, np.ndarray]
        (fitness, strength, density)
    """
    n = F.shape[0]
    if n == 0:
        empty = np.empty(0)
        return empty, np.empty(0, dtype=int), empty
    dom = dominance_matrix(F, cv)
    strength = dom.sum(axis=1)
    # raw[i] = sum of strength[j] over every j dominating i
    raw = strength @ dom.astype(np.int64)
    density = estimate_density(DensityKind.KNN, F, k if k is not None else _default_k(n))
    return raw + density, strength, density


def truncate_by_distance(F: np.ndarray, keep: int, k: int | None = None) -> np.ndarray:
    """Iteratively drop the most crowded member until ``keep`` remain.

    At every step the k-th nearest neighbour density is recomputed over the
    remaining members only, and the member with the largest density (the
    smallest k-th neighbour distance) is removed. Exact ties go to the lowest
    index. ``k`` defaults to sqrt(N) of the initial set and stays fixed; it is
    clamped to the number of remaining neighbours.

    Returns
    -------
    np.ndarray
        Indices of retained members in their original order.
    """
    F = np.asarray(F, dtype=float)
    candidates = np.arange(F.shape[0])
    if candidates.size <= keep:
        return candidates
    if k is None:
        k = _default_k(F.shape[0])
    while candidates.size > keep:
        density = estimate_density(DensityKind.KNN, F[candidates], k)
        # argmax returns the first maximum, so ties fall to the lowest index.
        candidates = np.delete(candidates, int(np.argmax(density)))
    return candidates


def environmental_selection(
    F: np.ndarray, archive_size: int, k: int | None = None, cv: np.ndarray | None = None
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """SPEA2 environmental selection over a minimization-space matrix.

    Returns
    -------
    tuple
        (selected indices, fitness, strength, density) where the last three
        cover every row of ``F``.
    """
    if k is None:
        k = _default_k(F.shape[0])
    fitness, strength, density = strength_fitness(F, k, cv)
    nondominated = np.flatnonzero(fitness < 1.0)
    if nondominated.size == archive_size:
        selected = nondominated
    elif nondominated.size < archive_size:
        order = np.argsort(fitness, kind="stable")
        selected = order[:archive_size]
    else:
        keep = truncate_by_distance(F[nondominated], archive_size, k)
        selected = nondominated[keep]
    return selected, fitness, strength, density


class SPEA2(Strategy):
    """
    Strength Pareto strategy.

    ``tag`` of every scored individual holds its strength, ``scalar`` its
    SPEA2 fitness and ``density`` the k-th nearest neighbour density.
    """

    name = "spea2"

    def __init__(self, config: SPEA2ConfigData, space: ObjectiveSpace) -> None:
        super().__init__(space)
        self.config = config.validate(space)
        self.k = config.effective_k
        self._tournament = TournamentSelection(config.tournament_size, strength_comparison)
        self._archive: list[Individual] = []

    @property
    def population_size(self) -> int:
        return self.config.pop_size

    @property
    def archive_size(self) -> int:
        return self.config.archive_size

    def _update_archive(self, pool: Sequence[Individual]) -> None:
        pool = unique_members(pool)
        F = self.space.to_minimization(objective_matrix(pool, self.space.n_obj))
        selected, fitness, strength, density = environmental_selection(
            F, self.config.archive_size, self.k, violation_vector(pool)
        )
        for ind, fit, s, d in zip(pool, fitness, strength, density):
            ind.scalar = float(fit)
            ind.tag = int(s)
            ind.density = float(d)
        self._archive = [pool[i] for i in selected]
        _logger.debug(
            "SPEA2 archive: %d of %d candidates kept (%d non-dominated).",
            len(self._archive),
            len(pool),
            int(np.count_nonzero(fitness < 1.0)),
        )

    def initialize(self, population: Sequence[Individual], random: RandomSource) -> list[Individual]:
        self._archive = []
        self._update_archive(population)
        return list(population)

    def mating_selection(
        self,
        population: Sequence[Individual],
        random: RandomSource,
        arity: int,
        n_children: int | None = None,
    ) -> list[Mating]:
        pool = self._archive or list(population)
        n = matings_needed(self.offspring_size, n_children or arity)
        return [Mating(parents=tuple(self._tournament(pool, arity, random))) for _ in range(n)]

    def select(
        self,
        parents: Sequence[Individual],
        offspring: Sequence[Individual],
        random: RandomSource,
    ) -> list[Individual]:
        self._update_archive(list(parents) + list(offspring) + self._archive)
        return list(offspring[: self.config.pop_size])

    @property
    def archive(self) -> tuple[Individual, ...]:
        return tuple(self._archive)

    def archive_snapshot(self) -> tuple[Individual, ...]:
        return tuple(ind.copy() for ind in self._archive)

    def approximation(self, population: Sequence[Individual]) -> list[Individual]:
        return first_front(self._archive, self.space)

    def diagnostics(self) -> dict[str, int]:
        return {"archive_size": len(self._archive), "k": self.k}


__all__ = ["SPEA2", "strength_fitness", "truncate_by_distance", "environmental_selection"]
