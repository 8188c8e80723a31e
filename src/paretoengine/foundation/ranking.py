"""Non-domination sorting over individuals."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from paretoengine.exceptions import InvariantViolationError

from .constraints import violation_vector
from .individual import Individual, objective_matrix
from .kernel import fast_non_dominated_sort
from .objectives import ObjectiveSpace

_logger = logging.getLogger(__name__)


def rank_matrix(F: np.ndarray, cv: np.ndarray | None = None) -> tuple[list[np.ndarray], np.ndarray]:
    """
    Sort an objective matrix (minimization space) into fronts.

    With a constraint violation vector ``cv`` the sort uses constrained
    dominance, so feasible rows always rank ahead of infeasible ones.

    Returns the list of index arrays per front and the 1-based rank of every
    row. The partition depends only on the values, never on row order.
    """
    fronts, rank0 = fast_non_dominated_sort(np.asarray(F, dtype=float), cv)
    ranks = rank0 + 1
    if ranks.size and int(ranks.min()) < 1:
        unranked = int(np.count_nonzero(rank0 < 0))
        raise InvariantViolationError(
            f"Non-dominated sort left {unranked} of {ranks.size} rows unranked.",
            unranked=unranked,
            size=int(ranks.size),
        )
    return fronts, ranks


def non_dominated_sort(individuals: Sequence[Individual], space: ObjectiveSpace) -> list[list[Individual]]:
    """
    Assign ``rank`` (front index, starting at 1) to every individual.

    Returns the fronts as lists of individuals; within a front the input order
    is preserved, which carries no meaning beyond determinism.
    """
    if not individuals:
        return []
    F = space.to_minimization(objective_matrix(individuals, space.n_obj))
    fronts, ranks = rank_matrix(F, violation_vector(individuals))
    for ind, r in zip(individuals, ranks):
        ind.rank = int(r)
    _logger.debug("Ranked %d individuals into %d fronts.", len(individuals), len(fronts))
    return [[individuals[i] for i in front] for front in fronts]


def first_front(individuals: Sequence[Individual], space: ObjectiveSpace) -> list[Individual]:
    """Non-dominated subset without touching the individuals' rank attribute."""
    if not individuals:
        return []
    F = space.to_minimization(objective_matrix(individuals, space.n_obj))
    fronts, _ = fast_non_dominated_sort(F, violation_vector(individuals))
    return [individuals[i] for i in fronts[0]]


__all__ = ["rank_matrix", "non_dominated_sort", "first_front"]
