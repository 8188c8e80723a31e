import numpy as np
import pytest
from numpy.testing import assert_allclose

from paretoengine.exceptions import ConfigurationError, InvalidStrategyError
from paretoengine.foundation.individual import Individual, objective_matrix, unique_members
from paretoengine.foundation.objectives import Direction, ObjectiveSpace
from paretoengine.foundation.random import (
    NumpyRandomSource,
    RandomSource,
    as_random_source,
    distinct_indices,
    shuffled,
)


def test_direction_parse_aliases():
    assert Direction.parse("Maximise") is Direction.MAXIMIZE
    assert Direction.parse(" min ") is Direction.MINIMIZE
    with pytest.raises(InvalidStrategyError):
        Direction.parse("sideways")


def test_objective_space_sign_map():
    space = ObjectiveSpace.from_directions(["min", "max", "min"])
    assert space.n_obj == 3
    F = np.array([[1.0, 2.0, 3.0]])
    assert_allclose(space.to_minimization(F), [[1.0, -2.0, 3.0]])
    assert_allclose(space.from_minimization(space.to_minimization(F)), F)
    with pytest.raises(ValueError):
        space.to_minimization([1.0, 2.0])
    with pytest.raises(ValueError):
        space.signs[0] = -1.0


def test_objective_space_needs_objectives():
    with pytest.raises(ConfigurationError):
        ObjectiveSpace(())
    with pytest.raises(ConfigurationError):
        ObjectiveSpace.minimize(0)


def test_fitness_is_read_only_and_reset_clears_derived_values():
    ind = Individual(genotype=[0.5], fitness=[1.0, 2.0], rank=1, density=0.3, scalar=0.7)
    with pytest.raises(ValueError):
        ind.fitness[0] = 9.0
    ind.set_fitness([3.0, 4.0])
    assert ind.rank is None and ind.density is None and ind.scalar is None
    assert_allclose(ind.fitness, [3.0, 4.0])


def test_copy_keeps_genotype_and_violation():
    ind = Individual(genotype=[0.5, 0.5], fitness=[1.0, 2.0], rank=2, tag=3, violation=0.25)
    shallow = ind.copy()
    assert shallow is not ind
    assert shallow.genotype is ind.genotype
    assert shallow.rank == 2 and shallow.tag == 3
    assert shallow.violation == 0.25


def test_violation_marks_feasibility():
    ind = Individual(genotype=[0.5], fitness=[1.0, 2.0])
    assert ind.feasible
    ind.set_fitness([1.0, 2.0], violation=1.5)
    assert not ind.feasible
    assert ind.violation == 1.5
    ind.set_fitness([1.0, 2.0])
    assert ind.feasible
    with pytest.raises(ValueError):
        Individual(genotype=None, violation=-0.1)
    with pytest.raises(ValueError):
        ind.set_fitness([1.0, 2.0], violation=float("nan"))



def test_identity_semantics(individuals_from):
    a, b = individuals_from([(1, 1), (1, 1)])
    b.genotype = a.genotype
    assert a != b
    assert unique_members([a, b, a]) == [a, b]


def test_objective_matrix_requires_fitness():
    assert objective_matrix([], 2).shape == (0, 2)
    with pytest.raises(ValueError):
        objective_matrix([Individual(genotype=None)])


def test_numpy_random_source_contract():
    source = NumpyRandomSource(3)
    assert isinstance(source, RandomSource)
    assert isinstance(source.uniform(), float)
    assert source.uniform(size=4).shape == (4,)
    draws = {source.choose(2, 5) for _ in range(200)}
    assert draws == {2, 3, 4}
    with pytest.raises(ValueError):
        source.choose(3, 3)


def test_seeded_sources_repeat():
    a = NumpyRandomSource(99)
    b = as_random_source(99)
    assert [a.choose(0, 100) for _ in range(10)] == [b.choose(0, 100) for _ in range(10)]
    assert as_random_source(a) is a


def test_shuffle_and_distinct_indices(random_source):
    items = list(range(10))
    out = shuffled(items, random_source)
    assert sorted(out) == items
    assert items == list(range(10))

    picks = distinct_indices(3, 0, 4, random_source)
    assert len(set(picks)) == 3
    assert all(0 <= p < 4 for p in picks)
    with pytest.raises(ValueError):
        distinct_indices(5, 0, 4, random_source)
