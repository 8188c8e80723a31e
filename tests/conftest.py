from __future__ import annotations

from typing import Sequence

import numpy as np
import pytest

from paretoengine.foundation.individual import Individual
from paretoengine.foundation.objectives import ObjectiveSpace
from paretoengine.foundation.random import NumpyRandomSource


class ZDT1Evaluator:
    """Two-objective ZDT1 over genotypes in [0, 1]^n_var."""

    n_obj = 2

    def __init__(self, n_var: int = 6) -> None:
        self.n_var = n_var
        self.calls = 0

    def evaluate(self, genotype):
        self.calls += 1
        x = np.asarray(genotype, dtype=float)
        f1 = x[0]
        g = 1.0 + 9.0 * np.sum(x[1:]) / (x.shape[0] - 1)
        f2 = g * (1.0 - np.sqrt(f1 / g))
        return [f1, f2]


def make_individuals(rows: Sequence[Sequence[float]]) -> list[Individual]:
    """Evaluated individuals whose genotype is their position in ``rows``."""
    return [Individual(genotype=i, fitness=row) for i, row in enumerate(rows)]


@pytest.fixture
def space2() -> ObjectiveSpace:
    return ObjectiveSpace.minimize(2)


@pytest.fixture
def space3() -> ObjectiveSpace:
    return ObjectiveSpace.minimize(3)


@pytest.fixture
def random_source() -> NumpyRandomSource:
    return NumpyRandomSource(12345)


@pytest.fixture
def zdt1() -> ZDT1Evaluator:
    return ZDT1Evaluator(n_var=6)


@pytest.fixture
def individuals_from():
    return make_individuals
