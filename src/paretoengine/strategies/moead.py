# strategies/moead.py
"""
MOEA/D: decomposition into weighted scalar sub-problems.

Population slot ``i`` holds the incumbent of sub-problem ``i``. Each
generation produces one child per sub-problem from parents drawn in its
neighbourhood; the child then competes against the incumbents of that
neighbourhood.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from paretoengine.archive import ParetoArchive
from paretoengine.config.moead import MOEADConfigData
from paretoengine.decomposition import DecompositionEngine, weight_vectors
from paretoengine.exceptions import InvariantViolationError
from paretoengine.foundation.individual import Individual, objective_matrix
from paretoengine.foundation.objectives import ObjectiveSpace
from paretoengine.foundation.random import RandomSource, distinct_indices, shuffled

from .base import Mating, Strategy


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class MOEAD(Strategy):
    """
    Decomposition-based strategy.

    Individuals carry their sub-problem index in ``tag`` and their scalarized
    value on that sub-problem in ``scalar``. The Pareto set is a
    ``ParetoArchive`` fed with every evaluated individual and bounded by
    ``pareto_set_capacity``, which defaults to the number of sub-problems.
    A child only replaces a less feasible incumbent, or an equally feasible
    one whose scalarized value is not better.
    """

    name = "moead"

    def __init__(
        self,
        config: MOEADConfigData,
        space: ObjectiveSpace,
        weights: np.ndarray | None = None,
    ) -> None:
        super().__init__(space)
        self.config = config.validate(space)
        if weights is None:
            weights = weight_vectors(config.pop_size, space.n_obj, config.divisions)
        self.engine = DecompositionEngine(
            weights,
            config.neighbor_size,
            config.aggregation,
            space,
            metric=config.neighbor_metric,
            theta=config.theta,
        )
        self.max_replacements = int(config.max_replacements)
        capacity = config.pareto_set_capacity or self.engine.n_subproblems
        self.pareto_set = ParetoArchive(space, capacity)
        self._replacements = 0

    @property
    def population_size(self) -> int:
        return self.engine.n_subproblems

    @property
    def ideal_point(self) -> np.ndarray:
        return self.engine.ideal_point

    def _check_population(self, population: Sequence[Individual]) -> None:
        if len(population) != self.engine.n_subproblems:
            raise InvariantViolationError(
                f"MOEA/D expects one individual per sub-problem ({self.engine.n_subproblems}), got {len(population)}.",
                expected=self.engine.n_subproblems,
                got=len(population),
            )

    def initialize(self, population: Sequence[Individual], random: RandomSource) -> list[Individual]:
        self._check_population(population)
        incumbents = list(population)
        for ind in incumbents:
            self.engine.update_ideal(ind.fitness)
        self.pareto_set.extend(incumbents)
        self._rescore(incumbents)
        return incumbents

    def _rescore(self, incumbents: list[Individual]) -> None:
        F = objective_matrix(incumbents, self.space.n_obj)
        values = self.engine.scalarize_many(F, np.arange(len(incumbents)))
        for i, (ind, value) in enumerate(zip(incumbents, values)):
            ind.tag = i
            ind.scalar = float(value)

    def mating_selection(
        self,
        population: Sequence[Individual],
        random: RandomSource,
        arity: int,
        n_children: int | None = None,
    ) -> list[Mating]:
        """One mating per sub-problem, parents drawn without repetition from its neighbourhood."""
        self._check_population(population)
        matings: list[Mating] = []
        for i in range(self.engine.n_subproblems):
            hood = self.engine.neighborhood(i)
            if hood.size >= arity:
                picks = [int(hood[p]) for p in distinct_indices(arity, 0, hood.size, random)]
            else:
                picks = distinct_indices(arity, 0, len(population), random)
            matings.append(Mating(parents=tuple(population[p] for p in picks), tag=i, keep=1))
        return matings

    def select(
        self,
        parents: Sequence[Individual],
        offspring: Sequence[Individual],
        random: RandomSource,
    ) -> list[Individual]:
        self._check_population(parents)
        incumbents = list(parents)
        replaced_total = 0
        for child in offspring:
            if child.tag is None:
                raise InvariantViolationError("MOEA/D offspring without a sub-problem tag.")
            own = int(child.tag)
            self.engine.update_ideal(child.fitness)
            self.pareto_set.insert(child)
            replaced = 0
            for j in shuffled([int(v) for v in self.engine.neighborhood(own)], random):
                if replaced >= self.max_replacements:
                    break
                incumbent = incumbents[j]
                if child.violation > incumbent.violation:
                    continue
                child_value = self.engine.scalarize(child.fitness, j)
                if child.violation < incumbent.violation or child_value <= self.engine.scalarize(incumbent.fitness, j):
                    winner = child.copy()
                    winner.tag = j
                    winner.scalar = child_value
                    incumbents[j] = winner
                    replaced += 1
            replaced_total += replaced
        self._replacements = replaced_total
        # The ideal point may have moved; keep every scalar on the same reference.
        self._rescore(incumbents)
        _logger().debug(
            "MOEA/D replaced %d incumbents; Pareto set size %d; ideal %s.",
            replaced_total,
            len(self.pareto_set),
            self.engine.ideal_point,
        )
        return incumbents

    def archive_snapshot(self) -> tuple[Individual, ...]:
        return self.pareto_set.snapshot()

    def approximation(self, population: Sequence[Individual]) -> list[Individual]:
        return list(self.pareto_set)

    def diagnostics(self) -> dict[str, object]:
        return {
            "replacements": self._replacements,
            "pareto_set_size": len(self.pareto_set),
            "ideal_point": self.engine.ideal_point.tolist(),
        }


__all__ = ["MOEAD"]
