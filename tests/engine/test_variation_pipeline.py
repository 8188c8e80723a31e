import numpy as np
import pytest

from paretoengine.exceptions import ConfigurationError, OptimizationError
from paretoengine.foundation.individual import Individual
from paretoengine.strategies.base import Mating
from paretoengine.variation import Recombinator, VariationPipeline


class Averaging:
    arity = 2

    def recombine(self, parents, random):
        mid = (np.asarray(parents[0]) + np.asarray(parents[1])) / 2.0
        return [mid, mid.copy(), mid.copy()]


class AddOne:
    def __init__(self):
        self.calls = 0

    def mutate(self, genotype, random):
        self.calls += 1
        return np.asarray(genotype) + 1.0


class Empty:
    arity = 1

    def recombine(self, parents, random):
        return []


def _mating(tag=None, keep=None):
    parents = (
        Individual(genotype=np.array([0.0, 0.0]), fitness=[0.0, 1.0]),
        Individual(genotype=np.array([2.0, 4.0]), fitness=[1.0, 0.0]),
    )
    return Mating(parents=parents, tag=tag, keep=keep)


def test_recombine_then_mutate(random_source):
    mutator = AddOne()
    pipeline = VariationPipeline(Averaging(), mutator)
    assert isinstance(pipeline.recombinator, Recombinator)
    assert pipeline.n_children == 2

    offspring = pipeline.produce([_mating(tag=7)], random_source)
    assert len(offspring) == 3
    assert mutator.calls == 3
    for child in offspring:
        assert child.tag == 7
        assert not child.evaluated
        assert child.genotype.tolist() == [2.0, 3.0]


def test_keep_and_limit(random_source):
    pipeline = VariationPipeline(Averaging())
    assert len(pipeline.produce([_mating(keep=1), _mating(keep=1)], random_source)) == 2
    assert len(pipeline.produce([_mating(), _mating()], random_source, limit=4)) == 4


def test_without_recombination_parents_are_copied(random_source):
    mating = _mating()
    pipeline = VariationPipeline(Averaging(), recombination_prob=0.0)
    offspring = pipeline.produce([mating], random_source)
    assert [c.genotype.tolist() for c in offspring] == [[0.0, 0.0], [2.0, 4.0]]
    assert offspring[0].genotype is not mating.parents[0].genotype


def test_mutation_probability_zero_skips_mutator(random_source):
    mutator = AddOne()
    pipeline = VariationPipeline(Averaging(), mutator, mutation_prob=0.0)
    pipeline.produce([_mating()], random_source)
    assert mutator.calls == 0


def test_parent_count_must_match_arity(random_source):
    pipeline = VariationPipeline(Averaging())
    single = Mating(parents=(Individual(genotype=np.zeros(2)),))
    with pytest.raises(OptimizationError):
        pipeline.produce([single], random_source)


def test_empty_recombination_is_an_error(random_source):
    pipeline = VariationPipeline(Empty())
    with pytest.raises(OptimizationError):
        pipeline.produce([Mating(parents=(Individual(genotype=np.zeros(2)),))], random_source)


@pytest.mark.parametrize("kwargs", [{"recombination_prob": 1.5}, {"mutation_prob": -0.1}])
def test_invalid_probabilities(kwargs):
    with pytest.raises(ConfigurationError):
        VariationPipeline(Averaging(), **kwargs)


def test_recombinator_needs_arity():
    class NoArity:
        def recombine(self, parents, random):
            return list(parents)

    with pytest.raises(ConfigurationError):
        VariationPipeline(NoArity())
