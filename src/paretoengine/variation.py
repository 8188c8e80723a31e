"""
Genotype-level collaborators and the variation pipeline.

The engine never looks inside a genotype. Creation, recombination and
mutation are supplied as small capability objects; the pipeline is the one
driver that applies them to the matings a strategy asks for.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Protocol, Sequence, runtime_checkable

from paretoengine.exceptions import ConfigurationError, OptimizationError
from paretoengine.foundation.individual import Individual
from paretoengine.foundation.random import RandomSource
from paretoengine.strategies.base import Mating

_logger = logging.getLogger(__name__)


@runtime_checkable
class Creator(Protocol):
    def create(self, size: int, random: RandomSource) -> list[Any]: ...


@runtime_checkable
class Recombinator(Protocol):
    """Combines ``arity`` parent genotypes into new genotypes (fresh objects, parents untouched)."""

    arity: int

    def recombine(self, parents: Sequence[Any], random: RandomSource) -> list[Any]: ...


@runtime_checkable
class Mutator(Protocol):
    def mutate(self, genotype: Any, random: RandomSource) -> Any: ...


class VariationPipeline:
    """
    Recombination followed by mutation, each applied with its own probability.

    A mating that is not recombined passes deep copies of its parents'
    genotypes on, so offspring never share a genotype object with a member of
    the current population.

    Parameters
    ----------
    recombinator : Recombinator
        Provides ``arity`` and ``recombine``.
    mutator : Mutator, optional
        Applied to every child with probability ``mutation_prob``.
    recombination_prob : float
        Probability that a mating is recombined (default 1.0).
    mutation_prob : float
        Probability that a child is handed to the mutator (default 1.0).
    n_children : int, optional
        Children returned per ``recombine`` call. Defaults to the
        recombinator's ``n_children`` attribute, else its arity.
    """

    def __init__(
        self,
        recombinator: Recombinator,
        mutator: Mutator | None = None,
        recombination_prob: float = 1.0,
        mutation_prob: float = 1.0,
        n_children: int | None = None,
    ) -> None:
        arity = getattr(recombinator, "arity", None)
        if not isinstance(arity, int) or arity < 1:
            raise ConfigurationError(f"Recombinator arity must be a positive integer, got {arity!r}.")
        for name, p in (("recombination_prob", recombination_prob), ("mutation_prob", mutation_prob)):
            if not 0.0 <= float(p) <= 1.0:
                raise ConfigurationError(f"{name} must lie in [0, 1], got {p}.")
        self.recombinator = recombinator
        self.mutator = mutator
        self.recombination_prob = float(recombination_prob)
        self.mutation_prob = float(mutation_prob)
        self.arity = arity
        self.n_children = int(n_children or getattr(recombinator, "n_children", arity))

    def _children(self, mating: Mating, random: RandomSource) -> list[Any]:
        genotypes = [p.genotype for p in mating.parents]
        if self.recombination_prob >= 1.0 or random.uniform(0.0, 1.0) < self.recombination_prob:
            children = list(self.recombinator.recombine(genotypes, random))
        else:
            children = [copy.deepcopy(g) for g in genotypes]
        if not children:
            raise OptimizationError("Recombinator returned no offspring.")
        if mating.keep is not None:
            children = children[: mating.keep]
        if self.mutator is not None:
            out = []
            for child in children:
                if self.mutation_prob >= 1.0 or random.uniform(0.0, 1.0) < self.mutation_prob:
                    child = self.mutator.mutate(child, random)
                out.append(child)
            children = out
        return children

    def produce(self, matings: Sequence[Mating], random: RandomSource, limit: int | None = None) -> list[Individual]:
        """Unevaluated offspring for ``matings``, at most ``limit`` of them, each tagged with its mating's tag."""
        offspring: list[Individual] = []
        for mating in matings:
            if len(mating.parents) != self.arity:
                raise OptimizationError(
                    f"Mating carries {len(mating.parents)} parents but the recombinator needs {self.arity}."
                )
            for genotype in self._children(mating, random):
                offspring.append(Individual(genotype=genotype, tag=mating.tag))
                if limit is not None and len(offspring) >= limit:
                    return offspring
        _logger.debug("Variation produced %d offspring from %d matings.", len(offspring), len(matings))
        return offspring


__all__ = ["Creator", "Recombinator", "Mutator", "VariationPipeline"]
