import numpy as np
import pytest
from numpy.testing import assert_allclose

from paretoengine.foundation.constraints import compute_violation, violation_vector
from paretoengine.foundation.individual import Individual


def test_violation_sums_positive_parts():
    G = np.array([[-1.0, 0.0], [0.5, -2.0], [1.0, 2.0]])
    assert_allclose(compute_violation(G), [0.0, 0.5, 3.0])


def test_unconstrained_batch_is_feasible():
    assert_allclose(compute_violation(None, n=3), [0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        compute_violation(np.array([1.0, 2.0]))


def test_violation_vector_is_none_when_all_feasible():
    feasible = [Individual(genotype=i, fitness=[0.0, 0.0]) for i in range(2)]
    assert violation_vector(feasible) is None
    mixed = feasible + [Individual(genotype=2, fitness=[0.0, 0.0], violation=0.3)]
    assert violation_vector(mixed).tolist() == [0.0, 0.0, 0.3]
