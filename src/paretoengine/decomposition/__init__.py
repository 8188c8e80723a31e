"""Decomposition of a multi-objective problem into weighted scalar sub-problems."""

from .engine import NEIGHBOR_METRICS, DecompositionEngine, compute_neighbors
from .scalarizing import Aggregation, build_scalarizer, pbi, tchebycheff, weighted_sum
from .weight_vectors import lattice_counts, lattice_size, validate_weights, weight_vectors

__all__ = [
    "DecompositionEngine",
    "compute_neighbors",
    "NEIGHBOR_METRICS",
    "Aggregation",
    "build_scalarizer",
    "tchebycheff",
    "weighted_sum",
    "pbi",
    "weight_vectors",
    "lattice_size",
    "lattice_counts",
    "validate_weights",
]
