import numpy as np
import pytest

from paretoengine.exceptions import ConfigurationError
from paretoengine.foundation.random import NumpyRandomSource
from paretoengine.operators import PolynomialMutator, RealCreator, SBXRecombinator


LOWER = np.zeros(5)
UPPER = np.array([1.0, 2.0, 3.0, 4.0, 5.0])


def test_creator_respects_bounds(random_source):
    genotypes = RealCreator(LOWER, UPPER).create(20, random_source)
    assert len(genotypes) == 20
    for g in genotypes:
        assert g.shape == (5,)
        assert np.all(g >= LOWER) and np.all(g <= UPPER)


def test_sbx_children_stay_in_bounds_and_leave_parents_alone(random_source):
    sbx = SBXRecombinator(LOWER, UPPER, eta=15.0, prob_var=1.0)
    p1 = np.array([0.1, 0.5, 1.0, 3.9, 0.0])
    p2 = np.array([0.9, 1.5, 2.0, 0.1, 5.0])
    before = (p1.copy(), p2.copy())
    for _ in range(50):
        c1, c2 = sbx.recombine([p1, p2], random_source)
        for child in (c1, c2):
            assert np.all(child >= LOWER) and np.all(child <= UPPER)
    np.testing.assert_array_equal(p1, before[0])
    np.testing.assert_array_equal(p2, before[1])


def test_sbx_identical_parents_are_copied(random_source):
    sbx = SBXRecombinator(LOWER, UPPER)
    p = np.array([0.5, 1.0, 1.5, 2.0, 2.5])
    c1, c2 = sbx.recombine([p, p], random_source)
    np.testing.assert_array_equal(c1, p)
    assert c1 is not p and c2 is not p


def test_polynomial_mutation_bounds_and_probability(random_source):
    x = np.array([0.0, 2.0, 1.5, 4.0, 2.5])
    always = PolynomialMutator(LOWER, UPPER, prob=1.0)
    never = PolynomialMutator(LOWER, UPPER, prob=0.0)
    for _ in range(50):
        y = always.mutate(x, random_source)
        assert np.all(y >= LOWER) and np.all(y <= UPPER)
    np.testing.assert_array_equal(never.mutate(x, random_source), x)
    assert PolynomialMutator(LOWER, UPPER).prob == pytest.approx(0.2)


def test_operators_are_reproducible():
    a, b = NumpyRandomSource(8), NumpyRandomSource(8)
    sbx = SBXRecombinator(LOWER, UPPER)
    p1, p2 = np.full(5, 0.2), np.full(5, 0.8)
    for x, y in zip(sbx.recombine([p1, p2], a), sbx.recombine([p1, p2], b)):
        np.testing.assert_array_equal(x, y)


def test_bad_bounds_and_lengths(random_source):
    with pytest.raises(ConfigurationError):
        RealCreator([0.0, 1.0], [1.0])
    with pytest.raises(ConfigurationError):
        SBXRecombinator([1.0], [0.0])
    with pytest.raises(ValueError):
        PolynomialMutator(LOWER, UPPER).mutate(np.zeros(3), random_source)
