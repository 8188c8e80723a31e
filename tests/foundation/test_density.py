import numpy as np
import pytest
from numpy.testing import assert_allclose

from paretoengine.exceptions import InvalidStrategyError
from paretoengine.foundation.density import (
    DensityKind,
    assign_crowding_distance,
    diversity_contribution,
    estimate_density,
)
from paretoengine.foundation.kernel import crowding_distance, knn_density
from paretoengine.foundation.objectives import ObjectiveSpace


def test_crowding_distance_inner_points():
    F = np.array([[0.0, 4.0], [1.0, 3.0], [2.0, 2.0], [4.0, 0.0]])
    assert_allclose(crowding_distance(F), [np.inf, 1.0, 1.5, np.inf])


def test_crowding_distance_ignores_degenerate_objective():
    F = np.array([[1.0, 0.0], [1.0, 1.0], [1.0, 2.0]])
    d = crowding_distance(F)
    assert np.isinf(d[0]) and np.isinf(d[2])
    assert d[1] == pytest.approx(1.0)


def test_crowding_distance_small_fronts_are_all_boundary():
    assert crowding_distance(np.empty((0, 2))).shape == (0,)
    assert np.all(np.isinf(crowding_distance(np.array([[1.0, 2.0]]))))
    assert np.all(np.isinf(crowding_distance(np.array([[1.0, 2.0], [2.0, 1.0]]))))


def test_knn_density_two_points():
    F = np.array([[0.0, 0.0], [3.0, 4.0]])
    assert_allclose(knn_density(F), [1.0 / 7.0, 1.0 / 7.0])


def test_knn_density_single_point_is_zero():
    assert_allclose(knn_density(np.array([[1.0, 1.0]])), [0.0])


def test_knn_density_clamps_k():
    F = np.array([[0.0, 0.0], [1.0, 0.0], [3.0, 0.0]])
    # k larger than N - 1 falls back to the farthest neighbour.
    assert_allclose(knn_density(F, k=10), knn_density(F, k=2))
    assert_allclose(knn_density(F, k=2), [1 / 5.0, 1 / 4.0, 1 / 5.0])


def test_knn_density_is_recomputed_after_removal():
    F = np.array([[0.0, 0.0], [0.5, 0.0], [4.0, 0.0]])
    before = knn_density(F, k=1)
    after = knn_density(F[[0, 2]], k=1)
    assert before[0] == pytest.approx(1 / 2.5)
    assert after[0] == pytest.approx(1 / 6.0)


def test_opposite_orientation_is_normalized():
    F = np.array([[0.0, 0.0], [0.1, 0.0], [5.0, 0.0]])
    crowd = diversity_contribution("crowding", F)
    knn = diversity_contribution(DensityKind.KNN, F, k=1)
    assert_allclose(knn, -estimate_density("knn", F, k=1))
    # The isolated row contributes the most spread under both estimators.
    assert np.argmax(knn) == 2
    assert np.isinf(crowd[2])


def test_unknown_density_kind():
    with pytest.raises(InvalidStrategyError):
        DensityKind.parse("hypergrid")


def test_assign_writes_density(individuals_from):
    space = ObjectiveSpace.from_directions(["max", "max"])
    front = individuals_from([(0, -4), (-1, -3), (-2, -2), (-4, 0)])
    values = assign_crowding_distance(front, space)
    assert [ind.density for ind in front] == list(values)
    assert front[1].density == pytest.approx(1.0)
    assert front[2].density == pytest.approx(1.5)


def test_assign_on_empty_front(space2):
    assert assign_crowding_distance([], space2).shape == (0,)


def test_crowding_is_recomputed_after_inner_removal(individuals_from):
    F = np.array([[0.0, 5.0], [1.0, 3.0], [2.0, 2.0], [3.0, 1.0], [5.0, 0.0]])
    full = crowding_distance(F)
    assert_allclose(full[[1, 3]], [1.0, 1.0])

    reduced = np.delete(F, 2, axis=0)
    front = individuals_from(reduced)
    values = assign_crowding_distance(front, ObjectiveSpace.minimize(2))
    assert_allclose(values, crowding_distance(reduced))
    assert_allclose(values[[1, 2]], [1.4, 1.4])
    assert np.isinf(values[0]) and np.isinf(values[-1])
