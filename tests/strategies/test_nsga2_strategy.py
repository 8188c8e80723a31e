import numpy as np
import pytest

from paretoengine.config import NSGA2Config
from paretoengine.foundation.individual import Individual
from paretoengine.strategies import NSGA2
from paretoengine.strategies.nsga2 import select_by_front
from paretoengine.strategies.selection import TournamentSelection, crowded_comparison


def _fitness(individuals):
    return sorted(tuple(float(v) for v in ind.fitness) for ind in individuals)


def test_elitist_survival_truncates_last_front_by_crowding(space2, individuals_from, random_source):
    strategy = NSGA2(NSGA2Config().pop_size(3).fixed(), space2)
    parents = individuals_from([(0, 4), (4, 0), (5, 5)])
    offspring = individuals_from([(1, 3), (1.2, 2.8), (6, 6)])
    strategy.initialize(parents, random_source)

    survivors = strategy.select(parents, offspring, random_source)

    assert _fitness(survivors) == [(0.0, 4.0), (1.2, 2.8), (4.0, 0.0)]
    assert all(ind.rank == 1 for ind in survivors)
    assert survivors[2].density == pytest.approx(1.5)
    assert strategy.diagnostics() == {"fronts": 3}


def test_whole_fronts_are_kept_when_they_fit(space2, individuals_from, random_source):
    strategy = NSGA2(NSGA2Config().pop_size(3).fixed(), space2)
    parents = individuals_from([(1, 1), (2, 2), (3, 3)])
    offspring = individuals_from([(0, 5), (4, 4), (5, 0)])
    strategy.initialize(parents, random_source)
    survivors = strategy.select(parents, offspring, random_source)
    assert _fitness(survivors) == [(0.0, 5.0), (1.0, 1.0), (5.0, 0.0)]


def test_select_by_front_keeps_front_order_on_ties():
    fronts = [[Individual(genotype=i, fitness=[i, -i]) for i in range(4)]]
    crowding = [np.array([np.inf, 1.0, 1.0, np.inf])]
    kept = select_by_front(fronts, crowding, 3)
    assert [ind.genotype for ind in kept] == [0, 3, 1]


def test_mating_selection_covers_offspring_size(space2, individuals_from, random_source):
    strategy = NSGA2(NSGA2Config().pop_size(5).fixed(), space2)
    pop = strategy.initialize(individuals_from([(0, 4), (1, 3), (2, 2), (3, 1), (4, 0)]), random_source)
    matings = strategy.mating_selection(pop, random_source, arity=2, n_children=2)
    assert len(matings) == 3
    assert all(len(m.parents) == 2 for m in matings)
    assert all(p in pop for m in matings for p in m.parents)


def test_approximation_is_first_front(space2, individuals_from, random_source):
    strategy = NSGA2(NSGA2Config.default(pop_size=4), space2)
    pop = strategy.initialize(individuals_from([(1, 1), (2, 2), (0, 5), (3, 3)]), random_source)
    assert [ind.genotype for ind in strategy.approximation(pop)] == [0, 2]
    assert strategy.archive_snapshot() == ()


def test_crowded_comparison():
    a = Individual(genotype=0, fitness=[0, 0], rank=1, density=0.2)
    b = Individual(genotype=1, fitness=[0, 0], rank=2, density=5.0)
    c = Individual(genotype=2, fitness=[0, 0], rank=1, density=0.9)
    assert crowded_comparison(a, b) < 0
    assert crowded_comparison(a, c) > 0
    assert crowded_comparison(a, a) == 0


def test_tournament_with_single_candidate(random_source):
    only = Individual(genotype=0, fitness=[1, 1], rank=1, density=0.0)
    tournament = TournamentSelection(2, crowded_comparison)
    assert tournament([only], 3, random_source) == [only, only, only]
    with pytest.raises(ValueError):
        tournament.pick([], random_source)
    with pytest.raises(ValueError):
        TournamentSelection(0, crowded_comparison)
