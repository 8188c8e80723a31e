import numpy as np
import pytest
from numpy.testing import assert_allclose

from paretoengine.decomposition import (
    Aggregation,
    DecompositionEngine,
    build_scalarizer,
    compute_neighbors,
    lattice_counts,
    lattice_size,
    pbi,
    tchebycheff,
    validate_weights,
    weight_vectors,
    weighted_sum,
)
from paretoengine.exceptions import ConfigurationError, InvalidStrategyError
from paretoengine.foundation.objectives import ObjectiveSpace


class TestWeightVectors:
    def test_two_objective_lattice(self):
        W = weight_vectors(5, 2)
        assert_allclose(W[:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])
        assert_allclose(W.sum(axis=1), 1.0)

    def test_three_objective_lattice_is_truncated_to_pop_size(self):
        W = weight_vectors(10, 3)
        assert W.shape == (10, 3)
        assert lattice_size(3, 3) == 10
        assert np.all(W >= 0.0)
        assert_allclose(W.sum(axis=1), 1.0)
        assert len({tuple(row) for row in W}) == 10

    def test_lattice_counts_enumerate_the_simplex(self):
        counts = lattice_counts(3, 2)
        assert counts.tolist() == [[0, 0, 2], [0, 1, 1], [0, 2, 0], [1, 0, 1], [1, 1, 0], [2, 0, 0]]
        assert counts.shape[0] == lattice_size(3, 2)

    @pytest.mark.parametrize("pop_size", [7, 100])
    def test_subsampled_lattice_keeps_unit_axes(self, pop_size):
        W = weight_vectors(pop_size, 3)
        assert W.shape == (pop_size, 3)
        assert len({tuple(row) for row in W}) == pop_size
        assert_allclose(W.sum(axis=1), 1.0)
        rows = {tuple(row) for row in W}
        for axis in np.eye(3):
            assert tuple(axis) in rows

    def test_coarse_divisions_are_raised(self):
        W = weight_vectors(6, 2, divisions=2)
        assert W.shape == (6, 2)

    def test_invalid_arguments(self):
        with pytest.raises(ConfigurationError):
            weight_vectors(0, 2)
        with pytest.raises(ConfigurationError):
            weight_vectors(4, 2, divisions=0)

    def test_validate_weights(self):
        validate_weights([[0.3, 0.7]], 2)
        with pytest.raises(ConfigurationError):
            validate_weights([[0.5, 0.6]], 2)
        with pytest.raises(ConfigurationError):
            validate_weights([[1.5, -0.5]], 2)
        with pytest.raises(ConfigurationError):
            validate_weights([[1.0, 0.0]], 3)


class TestScalarizing:
    f = np.array([2.0, 4.0])
    w = np.array([0.5, 0.5])
    ideal = np.zeros(2)

    def test_tchebycheff(self):
        assert tchebycheff(self.f, self.w, self.ideal) == pytest.approx(2.0)

    def test_weighted_sum(self):
        assert weighted_sum(self.f, self.w, self.ideal) == pytest.approx(3.0)

    def test_pbi(self):
        expected = 6.0 / np.sqrt(2.0) + 5.0 * np.sqrt(2.0)
        assert pbi(self.f, self.w, self.ideal) == pytest.approx(expected)
        assert build_scalarizer("pbi", theta=0.0)(self.f, self.w, self.ideal) == pytest.approx(6.0 / np.sqrt(2.0))

    def test_aggregation_aliases(self):
        assert Aggregation.parse("TE") is Aggregation.TCHEBYCHEFF
        assert Aggregation.parse("weighted-sum") is Aggregation.WEIGHTED_SUM
        assert str(Aggregation.PBI) == "pbi"
        with pytest.raises(InvalidStrategyError):
            Aggregation.parse("lp-norm")


class TestNeighbors:
    def test_self_is_always_first(self):
        W = weight_vectors(7, 2)
        for metric in ("angular", "euclidean"):
            B = compute_neighbors(W, 3, metric)
            assert B.shape == (7, 3)
            assert B[:, 0].tolist() == list(range(7))

    def test_closest_weights_follow(self):
        W = weight_vectors(5, 2)
        B = compute_neighbors(W, 3)
        assert B[0].tolist() == [0, 1, 2]
        assert sorted(B[2, 1:].tolist()) == [1, 3]
        assert B[4].tolist() == [4, 3, 2]

    def test_neighbors_are_read_only(self):
        B = compute_neighbors(weight_vectors(4, 2), 2)
        with pytest.raises(ValueError):
            B[0, 0] = 3

    def test_invalid_neighborhoods(self):
        W = weight_vectors(4, 2)
        with pytest.raises(ConfigurationError):
            compute_neighbors(W, 0)
        with pytest.raises(ConfigurationError):
            compute_neighbors(W, 5)
        with pytest.raises(InvalidStrategyError):
            compute_neighbors(W, 2, "manhattan")


class TestDecompositionEngine:
    def test_neighbourhood_must_be_smaller_than_subproblem_count(self, space2):
        with pytest.raises(ConfigurationError):
            DecompositionEngine(weight_vectors(4, 2), 4, "tchebycheff", space2)
        with pytest.raises(ConfigurationError):
            DecompositionEngine(weight_vectors(4, 2), 0, "tchebycheff", space2)

    def test_ideal_point_is_monotone(self, space2):
        engine = DecompositionEngine(weight_vectors(4, 2), 2, "tchebycheff", space2)
        assert np.all(np.isinf(engine.ideal))
        assert engine.update_ideal([3.0, 1.0])
        assert engine.update_ideal(np.array([[1.0, 5.0], [4.0, 4.0]]))
        assert not engine.update_ideal([2.0, 2.0])
        assert_allclose(engine.ideal, [1.0, 1.0])
        with pytest.raises(ValueError):
            engine.ideal[0] = -10.0

    def test_ideal_point_under_maximization(self):
        space = ObjectiveSpace.from_directions(["max", "min"])
        engine = DecompositionEngine(weight_vectors(3, 2), 1, "ws", space)
        engine.update_ideal([[2.0, 3.0], [5.0, 4.0]])
        assert_allclose(engine.ideal, [-5.0, 3.0])
        assert_allclose(engine.ideal_point, [5.0, 3.0])

    def test_scalarize_against_ideal(self, space2):
        W = np.array([[1.0, 0.0], [0.5, 0.5], [0.0, 1.0]])
        engine = DecompositionEngine(W, 2, "tchebycheff", space2)
        engine.update_ideal([0.0, 0.0])
        assert engine.scalarize([2.0, 4.0], 1) == pytest.approx(2.0)
        assert engine.scalarize([2.0, 4.0], 0) == pytest.approx(2.0)
        assert engine.scalarize([2.0, 4.0], 2) == pytest.approx(4.0)
        values = engine.scalarize_many(np.array([[2.0, 4.0], [2.0, 4.0]]), [0, 2])
        assert_allclose(values, [2.0, 4.0])
        assert engine.neighborhood(1)[0] == 1
        assert engine.n_subproblems == 3

    def test_weights_are_validated(self, space2):
        with pytest.raises(ConfigurationError):
            DecompositionEngine(np.array([[0.2, 0.2], [0.5, 0.5]]), 1, "te", space2)
