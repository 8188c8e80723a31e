"""
Individual record and population helpers.

An Individual pairs an opaque genotype with its objective vector and the
quality attributes strategies derive from it. Equality is identity: two
individuals with the same genotype and fitness are still distinct members of
a population.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np


def _frozen(values: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(-1)
    arr.setflags(write=False)
    return arr


def _check_violation(value: float) -> float:
    value = float(value)
    if not value >= 0.0:
        raise ValueError(f"Constraint violation must be a non-negative number, got {value}.")
    return value


@dataclass(eq=False)
class Individual:
    genotype: Any
    fitness: np.ndarray | None = None
    rank: int | None = None
    density: float | None = None
    tag: Any = None
    scalar: float | None = None
    violation: float = 0.0

    def __post_init__(self) -> None:
        if self.fitness is not None:
            self.fitness = _frozen(self.fitness)
        self.violation = _check_violation(self.violation)

    @property
    def evaluated(self) -> bool:
        return self.fitness is not None

    @property
    def feasible(self) -> bool:
        return self.violation <= 0.0

    def set_fitness(self, values: Sequence[float] | np.ndarray, violation: float = 0.0) -> None:
        """Store a fresh objective vector and drop every attribute derived from the old one."""
        self.fitness = _frozen(values)
        self.violation = _check_violation(violation)
        self.rank = None
        self.density = None
        self.scalar = None

    def copy(self) -> "Individual":
        """Shallow copy: the read-only fitness array and the genotype handle are shared."""
        return Individual(
            genotype=self.genotype,
            fitness=self.fitness,
            rank=self.rank,
            density=self.density,
            tag=self.tag,
            scalar=self.scalar,
            violation=self.violation,
        )

    def __repr__(self) -> str:
        fit = None if self.fitness is None else np.array2string(self.fitness, precision=4)
        cv = "" if self.feasible else f", violation={self.violation:.4g}"
        return f"Individual(fitness={fit}, rank={self.rank}, density={self.density}, tag={self.tag}{cv})"


def objective_matrix(individuals: Sequence[Individual], n_obj: int | None = None) -> np.ndarray:
    """Stack fitness vectors into an (N, M) float matrix."""
    if not individuals:
        return np.empty((0, n_obj or 0), dtype=float)
    rows = []
    for ind in individuals:
        if ind.fitness is None:
            raise ValueError("Cannot build an objective matrix from unevaluated individuals.")
        rows.append(ind.fitness)
    return np.vstack(rows)


def unique_members(individuals: Sequence[Individual]) -> list[Individual]:
    """Drop repeated references (identity) while keeping first-seen order."""
    seen: set[int] = set()
    out: list[Individual] = []
    for ind in individuals:
        key = id(ind)
        if key in seen:
            continue
        seen.add(key)
        out.append(ind)
    return out


__all__ = ["Individual", "objective_matrix", "unique_members"]
