"""
Strategy interface shared by the three selection paradigms.

A strategy never owns the population: the controller hands it in for the
duration of one call and receives the next generation back. Strategy state
that persists across generations (an archive, a decomposition table) lives on
the strategy instance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence

from paretoengine.foundation.individual import Individual
from paretoengine.foundation.objectives import ObjectiveSpace
from paretoengine.foundation.random import RandomSource
from paretoengine.foundation.ranking import first_front


@dataclass(frozen=True)
class Mating:
    """One recombination request: the parents, the tag copied onto the children and how many children to keep."""

    parents: tuple[Individual, ...]
    tag: Any = None
    keep: int | None = None


class Strategy(ABC):
    """
    Generational step function.

    Lifecycle: ``initialize`` once on the evaluated initial population, then
    per generation ``mating_selection`` followed, after variation and
    evaluation of the offspring, by ``select``.
    """

    name: str = "strategy"

    def __init__(self, space: ObjectiveSpace) -> None:
        self.space = space

    @property
    @abstractmethod
    def population_size(self) -> int:
        """Size of the population the strategy returns from ``select``."""

    @property
    def offspring_size(self) -> int:
        """Number of offspring expected per generation."""
        return self.population_size

    @abstractmethod
    def initialize(self, population: Sequence[Individual], random: RandomSource) -> list[Individual]:
        """Prepare strategy state from the evaluated initial population; returns the population to breed from."""

    @abstractmethod
    def mating_selection(
        self,
        population: Sequence[Individual],
        random: RandomSource,
        arity: int,
        n_children: int | None = None,
    ) -> list[Mating]:
        """
        Choose parents for the next batch of offspring.

        ``arity`` is the number of parents the recombinator consumes and
        ``n_children`` how many children it returns per call (defaults to
        ``arity``).
        """

    @abstractmethod
    def select(
        self,
        parents: Sequence[Individual],
        offspring: Sequence[Individual],
        random: RandomSource,
    ) -> list[Individual]:
        """Environmental selection / replacement producing the next generation."""

    def archive_snapshot(self) -> tuple[Individual, ...]:
        """Copies of the strategy archive; empty for strategies without one."""
        return ()

    def approximation(self, population: Sequence[Individual]) -> list[Individual]:
        """Current approximation of the Pareto front (references, not copies)."""
        return first_front(population, self.space)

    def diagnostics(self) -> dict[str, Any]:
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(population_size={self.population_size})"


def matings_needed(offspring_size: int, n_children: int) -> int:
    """Number of recombinations producing at least ``offspring_size`` children."""
    if n_children < 1:
        raise ValueError("A recombinator must produce at least one child.")
    return -(-offspring_size // n_children)


__all__ = ["Mating", "Strategy", "matings_needed"]
