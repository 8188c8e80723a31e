"""Numeric building blocks: objective space, individuals, dominance, ranking, density, indicators."""

from .constraints import compute_violation, violation_vector
from .density import DensityKind, assign_crowding_distance, diversity_contribution, estimate_density
from .dominance import Dominance, compare, constrained_compare, dominates
from .indicators import (
    additive_epsilon,
    coverage,
    generational_distance,
    hypervolume,
    inverted_generational_distance,
    nondominated_mask,
    spacing,
)
from .individual import Individual, objective_matrix, unique_members
from .kernel import crowding_distance, dominance_matrix, fast_non_dominated_sort, knn_density, pairwise_distances
from .objectives import Direction, ObjectiveSpace
from .random import NumpyRandomSource, RandomSource
from .ranking import first_front, non_dominated_sort, rank_matrix

__all__ = [
    "Direction",
    "ObjectiveSpace",
    "Individual",
    "objective_matrix",
    "unique_members",
    "Dominance",
    "compare",
    "constrained_compare",
    "dominates",
    "compute_violation",
    "violation_vector",
    "dominance_matrix",
    "fast_non_dominated_sort",
    "crowding_distance",
    "pairwise_distances",
    "knn_density",
    "rank_matrix",
    "non_dominated_sort",
    "first_front",
    "DensityKind",
    "estimate_density",
    "diversity_contribution",
    "assign_crowding_distance",
    "hypervolume",
    "spacing",
    "generational_distance",
    "inverted_generational_distance",
    "additive_epsilon",
    "coverage",
    "nondominated_mask",
    "RandomSource",
    "NumpyRandomSource",
]
