"""
NSGA-II: Pareto ranking with crowding-distance tie-breaking.

The population itself is the approximation set; there is no archive.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from paretoengine.config.nsga2 import NSGA2ConfigData
from paretoengine.foundation.density import assign_crowding_distance
from paretoengine.foundation.individual import Individual, unique_members
from paretoengine.foundation.objectives import ObjectiveSpace
from paretoengine.foundation.random import RandomSource
from paretoengine.foundation.ranking import non_dominated_sort

from .base import Mating, Strategy, matings_needed
from .selection import TournamentSelection, crowded_comparison


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def select_by_front(fronts: list[list[Individual]], crowding: list[np.ndarray], pop_size: int) -> list[Individual]:
    """
    Elitist fill: whole fronts while they fit, then the last front by
    descending crowding distance. Equal distances keep their front order.
    """
    selected: list[Individual] = []
    for front, d in zip(fronts, crowding):
        if len(selected) + len(front) <= pop_size:
            selected.extend(front)
            if len(selected) == pop_size:
                break
            continue
        rem = pop_size - len(selected)
        order = np.argsort(-d, kind="stable")
        selected.extend(front[i] for i in order[:rem])
        break
    return selected


class NSGA2(Strategy):
    """
    Elitist non-dominated sorting strategy.

    ``select`` merges parents and offspring, ranks the union and keeps
    ``pop_size`` survivors. Every survivor carries the rank and crowding
    distance computed in that pass, which the next mating tournament reads.
    """

    name = "nsga2"

    def __init__(self, config: NSGA2ConfigData, space: ObjectiveSpace) -> None:
        super().__init__(space)
        self.config = config.validate(space)
        self._tournament = TournamentSelection(config.tournament_size, crowded_comparison)
        self._last_front_count = 0

    @property
    def population_size(self) -> int:
        return self.config.pop_size

    def _rank_and_crowd(self, individuals: Sequence[Individual]) -> tuple[list[list[Individual]], list[np.ndarray]]:
        fronts = non_dominated_sort(individuals, self.space)
        crowding = [assign_crowding_distance(front, self.space) for front in fronts]
        self._last_front_count = len(fronts)
        return fronts, crowding

    def initialize(self, population: Sequence[Individual], random: RandomSource) -> list[Individual]:
        self._rank_and_crowd(population)
        return list(population)

    def mating_selection(
        self,
        population: Sequence[Individual],
        random: RandomSource,
        arity: int,
        n_children: int | None = None,
    ) -> list[Mating]:
        n = matings_needed(self.offspring_size, n_children or arity)
        return [Mating(parents=tuple(self._tournament(population, arity, random))) for _ in range(n)]

    def select(
        self,
        parents: Sequence[Individual],
        offspring: Sequence[Individual],
        random: RandomSource,
    ) -> list[Individual]:
        combined = unique_members(list(parents) + list(offspring))
        fronts, crowding = self._rank_and_crowd(combined)
        survivors = select_by_front(fronts, crowding, self.config.pop_size)
        _logger().debug(
            "NSGA-II kept %d of %d across %d fronts (first front size %d).",
            len(survivors),
            len(combined),
            len(fronts),
            len(fronts[0]) if fronts else 0,
        )
        return survivors

    def approximation(self, population: Sequence[Individual]) -> list[Individual]:
        if population and all(ind.rank is not None for ind in population):
            return [ind for ind in population if ind.rank == 1]
        return super().approximation(population)

    def diagnostics(self) -> dict[str, int]:
        return {"fronts": self._last_front_count}


__all__ = ["NSGA2", "select_by_front"]
