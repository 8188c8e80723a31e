"""
Generational loop controller.

Drives one strategy through the run state machine::

    INITIALIZED -> EVALUATING -> SELECTING -> EVALUATING -> ... -> TERMINATED

Generations are strictly sequential: a batch is fully evaluated and validated
before the strategy sees it, and the termination predicate is only checked
once selection for the generation has finished.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

import numpy as np

from paretoengine.archive import ParetoArchive
from paretoengine.config import StrategyConfig
from paretoengine.eval import EvaluationBackend, Evaluator, resolve_eval_backend
from paretoengine.eval.backends import evaluate_batch_with_constraints
from paretoengine.exceptions import (
    ConfigurationError,
    InvariantViolationError,
    ObjectiveCountError,
    OptimizationError,
)
from paretoengine.foundation.constraints import compute_violation
from paretoengine.foundation.individual import Individual, objective_matrix
from paretoengine.foundation.objectives import ObjectiveSpace
from paretoengine.foundation.random import RandomSource, as_random_source
from paretoengine.strategies import Strategy, build_strategy
from paretoengine.termination import Termination, parse_termination
from paretoengine.variation import Creator, VariationPipeline


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


class LoopState(str, Enum):
    INITIALIZED = "initialized"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    TERMINATED = "terminated"

    def __str__(self) -> str:
        return self.value


_TRANSITIONS: dict[LoopState, frozenset[LoopState]] = {
    LoopState.INITIALIZED: frozenset({LoopState.EVALUATING}),
    LoopState.EVALUATING: frozenset({LoopState.SELECTING}),
    LoopState.SELECTING: frozenset({LoopState.EVALUATING, LoopState.TERMINATED}),
    LoopState.TERMINATED: frozenset(),
}


@dataclass(frozen=True)
class RunSnapshot:
    """
    Read-only view of a run at a generation boundary.

    Every individual in the snapshot is a copy; mutating it has no effect on
    the running loop.
    """

    population: tuple[Individual, ...]
    archive: tuple[Individual, ...]
    external_archive: tuple[Individual, ...]
    approximation: tuple[Individual, ...]
    generation: int
    evaluations: int
    state: LoopState
    strategy: str
    diagnostics: dict[str, Any]

    @property
    def ranks(self) -> tuple[int | None, ...]:
        return tuple(ind.rank for ind in self.population)

    @property
    def densities(self) -> tuple[float | None, ...]:
        return tuple(ind.density for ind in self.population)

    @property
    def F(self) -> np.ndarray:
        """Objective matrix of the approximation set, in original units."""
        if not self.approximation:
            return np.empty((0, 0), dtype=float)
        return objective_matrix(self.approximation)


class GenerationalLoop:
    """
    Owns the population and delegates selection to exactly one strategy.

    Parameters
    ----------
    strategy_config : StrategyConfig
        Frozen NSGA-II, SPEA2 or MOEA/D configuration. Validated here, before
        anything is evaluated.
    space : ObjectiveSpace
        Objective count and directions.
    creator : Creator
        Builds the initial genotypes.
    evaluator : Evaluator
        Objective function over a genotype.
    variation : VariationPipeline
        Recombination and mutation driver.
    termination : Termination or tuple
        ``Termination`` or ``("n_eval", N)`` / ``("n_gen", G)``.
    random : RandomSource, int or None
        Random source, or a seed for a numpy-backed one.
    eval_backend : EvaluationBackend, str or None
        ``"serial"`` (default), ``"multiprocessing"`` or a backend instance.
    external_archive_size : int, optional
        When set, a ``ParetoArchive`` of that capacity collects every
        evaluated individual, independently of the strategy.
    """

    def __init__(
        self,
        strategy_config: StrategyConfig,
        space: ObjectiveSpace,
        creator: Creator,
        evaluator: Evaluator,
        variation: VariationPipeline,
        termination: Termination | tuple[str, Any],
        random: RandomSource | int | None = None,
        eval_backend: EvaluationBackend | str | None = None,
        external_archive_size: int | None = None,
    ) -> None:
        self.space = space
        self.termination = parse_termination(termination)
        self.strategy: Strategy = build_strategy(strategy_config, space)
        declared = getattr(evaluator, "n_obj", None)
        if declared is not None and int(declared) != space.n_obj:
            raise ObjectiveCountError(space.n_obj, int(declared), type(evaluator).__name__)
        self.creator = creator
        self.evaluator = evaluator
        self.variation = variation
        self.random = as_random_source(random)
        if eval_backend is None or isinstance(eval_backend, str):
            self.eval_backend = resolve_eval_backend(eval_backend)
        else:
            self.eval_backend = eval_backend
        self.external_archive: ParetoArchive | None = None
        if external_archive_size is not None:
            if external_archive_size > self.strategy.population_size:
                raise ConfigurationError(
                    f"external_archive_size={external_archive_size} exceeds the population size "
                    f"{self.strategy.population_size}.",
                    details={"external_archive_size": external_archive_size},
                )
            self.external_archive = ParetoArchive(space, external_archive_size)

        self.population: list[Individual] = []
        self.generation = 0
        self.evaluations = 0
        self._state = LoopState.INITIALIZED

    @property
    def state(self) -> LoopState:
        return self._state

    def _transition(self, target: LoopState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise InvariantViolationError(
                f"Illegal loop transition {self._state} -> {target}.",
                source=self._state.value,
                target=target.value,
            )
        self._state = target

    def _evaluate(self, individuals: Sequence[Individual]) -> None:
        genotypes = [ind.genotype for ind in individuals]
        F, G = evaluate_batch_with_constraints(genotypes, self.evaluator, self.space.n_obj, self.eval_backend)
        cv = compute_violation(G, n=len(individuals))
        # Fitness is only written once the whole batch is back and validated.
        for ind, row, violation in zip(individuals, F, cv):
            ind.set_fitness(row, violation)
        self.evaluations += len(individuals)

    def _finish_selection(self) -> None:
        if self.termination.is_met(self.generation, self.evaluations):
            self._transition(LoopState.TERMINATED)

    def initialize(self) -> None:
        """Create, evaluate and hand the initial population to the strategy."""
        if self._state is not LoopState.INITIALIZED:
            raise OptimizationError(f"initialize() called in state {self._state}.")
        size = self.strategy.population_size
        genotypes = list(self.creator.create(size, self.random))
        if len(genotypes) != size:
            raise OptimizationError(f"Creator returned {len(genotypes)} genotypes; {size} were requested.")
        individuals = [Individual(genotype=g) for g in genotypes]

        self._transition(LoopState.EVALUATING)
        self._evaluate(individuals)
        self._transition(LoopState.SELECTING)
        self.population = self.strategy.initialize(individuals, self.random)
        if self.external_archive is not None:
            self.external_archive.extend(individuals)
        _logger().debug("Initial population of %d evaluated.", len(self.population))
        self._finish_selection()

    def step(self) -> None:
        """Run one generation: mating, variation, evaluation and environmental selection."""
        if self._state is LoopState.INITIALIZED:
            self.initialize()
            return
        if self._state is LoopState.TERMINATED:
            raise OptimizationError("The run has already terminated.")

        expected = self.strategy.offspring_size
        matings = self.strategy.mating_selection(
            self.population, self.random, self.variation.arity, self.variation.n_children
        )
        offspring = self.variation.produce(matings, self.random, limit=expected)
        if len(offspring) != expected:
            raise OptimizationError(f"Variation produced {len(offspring)} offspring; {expected} were expected.")

        self._transition(LoopState.EVALUATING)
        self._evaluate(offspring)
        self._transition(LoopState.SELECTING)
        self.population = self.strategy.select(self.population, offspring, self.random)
        if self.external_archive is not None:
            self.external_archive.extend(offspring)
        self.generation += 1
        _logger().debug(
            "Generation %d: %d evaluations, %s.",
            self.generation,
            self.evaluations,
            self.strategy.diagnostics(),
        )
        self._finish_selection()

    def run(self) -> RunSnapshot:
        _logger().info(
            "Starting %s: population %d, %s.",
            self.strategy.name,
            self.strategy.population_size,
            self.termination,
        )
        while self._state is not LoopState.TERMINATED:
            self.step()
        _logger().info(
            "%s terminated after %d generations and %d evaluations.",
            self.strategy.name,
            self.generation,
            self.evaluations,
        )
        return self.snapshot()

    def snapshot(self) -> RunSnapshot:
        external = self.external_archive.snapshot() if self.external_archive is not None else ()
        approximation = self.strategy.approximation(self.population) if self.population else []
        return RunSnapshot(
            population=tuple(ind.copy() for ind in self.population),
            archive=self.strategy.archive_snapshot(),
            external_archive=external,
            approximation=tuple(ind.copy() for ind in approximation),
            generation=self.generation,
            evaluations=self.evaluations,
            state=self._state,
            strategy=self.strategy.name,
            diagnostics=dict(self.strategy.diagnostics()),
        )


def optimize(
    strategy_config: StrategyConfig,
    space: ObjectiveSpace,
    creator: Creator,
    evaluator: Evaluator,
    variation: VariationPipeline,
    termination: Termination | tuple[str, Any],
    seed: RandomSource | int | None = None,
    eval_backend: EvaluationBackend | str | None = None,
    external_archive_size: int | None = None,
) -> RunSnapshot:
    """Build a ``GenerationalLoop`` and run it to termination.

    Example:
        snapshot = optimize(
            NSGA2Config().pop_size(40).fixed(),
            ObjectiveSpace.minimize(2),
            RealCreator(lower, upper),
            evaluator,
            VariationPipeline(SBXRecombinator(lower, upper), PolynomialMutator(lower, upper)),
            ("n_gen", 50),
            seed=1,
        )
    """
    loop = GenerationalLoop(
        strategy_config,
        space,
        creator,
        evaluator,
        variation,
        termination,
        random=seed,
        eval_backend=eval_backend,
        external_archive_size=external_archive_size,
    )
    return loop.run()


__all__ = ["LoopState", "RunSnapshot", "GenerationalLoop", "optimize"]
