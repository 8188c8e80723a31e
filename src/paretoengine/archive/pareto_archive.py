from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Sequence

import numpy as np

from paretoengine.exceptions import ConfigurationError, InvariantViolationError
from paretoengine.foundation.constraints import violation_vector
from paretoengine.foundation.density import DensityKind, diversity_contribution
from paretoengine.foundation.individual import Individual, objective_matrix
from paretoengine.foundation.kernel import dominance_matrix
from paretoengine.foundation.objectives import ObjectiveSpace

_logger = logging.getLogger(__name__)

DensityFn = Callable[[Sequence[Individual]], np.ndarray]


def _validate_capacity(capacity: int | None) -> int | None:
    if capacity is None:
        return None
    if isinstance(capacity, bool) or not isinstance(capacity, (int, np.integer)):
        raise ConfigurationError(f"Archive capacity must be an integer, got {capacity!r}.")
    if capacity <= 0:
        raise ConfigurationError(
            f"Archive capacity must be > 0, got {capacity}.",
            suggestion="Use capacity=None for an unbounded archive",
            details={"capacity": int(capacity)},
        )
    return int(capacity)


class ParetoArchive:
    """
    Bounded, insertion-ordered set of mutually non-dominated individuals.

    Parameters
    ----------
    space : ObjectiveSpace
        Objective directions used for every dominance test.
    capacity : int or None
        Maximum number of members; ``None`` keeps every non-dominated member.
    density : DensityKind or str
        Estimator used for truncation, ``"crowding"`` (default) or ``"knn"``.
        Either way it is re-oriented through ``diversity_contribution`` so
        that larger means more isolated.
    k : int, optional
        Neighbour index for the ``"knn"`` estimator.
    density_fn : callable, optional
        ``density_fn(members) -> array`` overriding ``density``; same
        orientation. Over-capacity truncation removes the smallest value.

    Notes
    -----
    Members are stored by reference. ``snapshot()`` hands out copies so that
    callers can never break the dominance-consistency of the archive.
    """

    def __init__(
        self,
        space: ObjectiveSpace,
        capacity: int | None = None,
        density_fn: DensityFn | None = None,
        density: DensityKind | str = DensityKind.CROWDING,
        k: int | None = None,
    ) -> None:
        self.space = space
        self.capacity = _validate_capacity(capacity)
        self.density = DensityKind.parse(density)
        self.k = k
        self._density_fn = density_fn or self._contribution
        self._members: list[Individual] = []

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Individual]:
        return iter(tuple(self._members))

    def __contains__(self, ind: object) -> bool:
        return any(m is ind for m in self._members)

    @property
    def size(self) -> int:
        return len(self._members)

    def _minimized(self, members: Sequence[Individual]) -> np.ndarray:
        return self.space.to_minimization(objective_matrix(members, self.space.n_obj))

    def _contribution(self, members: Sequence[Individual]) -> np.ndarray:
        return diversity_contribution(self.density, self._minimized(members), self.k)

    def insert(self, ind: Individual) -> bool:
        """
        Offer ``ind`` to the archive.

        Rejected when a member dominates it or has an identical fitness and
        violation. Dominance is constrained: a lower constraint violation wins
        before objectives are compared. Members it dominates are dropped before
        it is appended, then capacity is enforced. Returns whether ``ind`` is a
        member afterwards.
        """
        if ind.fitness is None:
            raise ValueError("Only evaluated individuals can enter an archive.")
        if ind in self:
            return True
        f = self.space.to_minimization(ind.fitness)
        v = ind.violation
        if self._members:
            F = self._minimized(self._members)
            V = np.array([m.violation for m in self._members], dtype=float)
            same = V == v
            no_worse = (V < v) | (same & np.all(F <= f, axis=1))
            if np.any(no_worse):
                # Either dominated by a member or a duplicate of one.
                return False
            dominated = (v < V) | (same & np.all(f <= F, axis=1) & np.any(f < F, axis=1))
            if np.any(dominated):
                self._members = [m for m, gone in zip(self._members, dominated) if not gone]
        self._members.append(ind)
        self.enforce_capacity()
        return ind in self

    def extend(self, individuals: Iterable[Individual]) -> int:
        """Insert several individuals in order; returns how many were accepted on arrival."""
        accepted = 0
        for ind in individuals:
            if self.insert(ind):
                accepted += 1
        return accepted

    def enforce_capacity(self) -> int:
        """Evict least-spread members one at a time until within capacity; returns the eviction count."""
        if self.capacity is None:
            return 0
        removed = 0
        while len(self._members) > self.capacity:
            contrib = np.asarray(self._density_fn(self._members), dtype=float)
            if contrib.shape != (len(self._members),):
                raise InvariantViolationError(
                    "Density function returned a value count that does not match the archive size.",
                    expected=len(self._members),
                    got=contrib.shape,
                )
            # argmin returns the first minimum, so ties fall to insertion order.
            victim = int(np.argmin(contrib))
            del self._members[victim]
            removed += 1
        if removed:
            _logger.debug("Archive truncated by %d member(s) to capacity %d.", removed, self.capacity)
        return removed

    def snapshot(self) -> tuple[Individual, ...]:
        return tuple(m.copy() for m in self._members)

    def clear(self) -> None:
        self._members.clear()

    def check_invariants(self) -> None:
        """Raise InvariantViolationError on an over-capacity archive or a dominated pair."""
        n = len(self._members)
        if self.capacity is not None and n > self.capacity:
            raise InvariantViolationError(
                f"Archive holds {n} members but its capacity is {self.capacity}.",
                size=n,
                capacity=self.capacity,
            )
        if n < 2:
            return
        dom = dominance_matrix(self._minimized(self._members), violation_vector(self._members))
        if np.any(dom):
            i, j = (int(v) for v in np.argwhere(dom)[0])
            raise InvariantViolationError(
                f"Archive member {i} dominates member {j}.",
                dominating=i,
                dominated=j,
            )

    def __repr__(self) -> str:
        return f"ParetoArchive(size={len(self._members)}, capacity={self.capacity}, density={self.density.value})"


__all__ = ["ParetoArchive", "DensityFn"]
