from __future__ import annotations

from collections.abc import Callable, Sequence

from paretoengine.foundation.individual import Individual
from paretoengine.foundation.random import RandomSource, coin


def crowded_comparison(a: Individual, b: Individual) -> int:
    """
    NSGA-II crowded comparison.

    Returns <0 if ``a`` is preferred, >0 if ``b`` is preferred, 0 on a tie:
    lower rank wins, then larger crowding distance.
    """
    if a.rank != b.rank:
        return -1 if (a.rank or 0) < (b.rank or 0) else 1
    da = a.density if a.density is not None else 0.0
    db = b.density if b.density is not None else 0.0
    if da > db:
        return -1
    if db > da:
        return 1
    return 0


def strength_comparison(a: Individual, b: Individual) -> int:
    """SPEA2 comparison: smaller fitness wins, then smaller nearest-neighbour density."""
    fa = a.scalar if a.scalar is not None else float("inf")
    fb = b.scalar if b.scalar is not None else float("inf")
    if fa != fb:
        return -1 if fa < fb else 1
    da = a.density if a.density is not None else 0.0
    db = b.density if b.density is not None else 0.0
    if da != db:
        return -1 if da < db else 1
    return 0


class TournamentSelection:
    """
    Tournament selection using a comparator.
    comparator(a, b) returns <0 if a better than b, >0 if b better, 0 if tie.
    Ties between the final contenders are settled by a coin flip.
    """

    def __init__(self, tournament_size: int, comparator: Callable[[Individual, Individual], int]) -> None:
        if tournament_size <= 0:
            raise ValueError("tournament_size must be positive.")
        self.tournament_size = int(tournament_size)
        self.comparator = comparator

    def pick(self, pool: Sequence[Individual], random: RandomSource) -> Individual:
        if not pool:
            raise ValueError("population is empty.")
        best = pool[random.choose(0, len(pool))]
        for _ in range(self.tournament_size - 1):
            challenger = pool[random.choose(0, len(pool))]
            cmp = self.comparator(challenger, best)
            if cmp < 0 or (cmp == 0 and coin(random)):
                best = challenger
        return best

    def __call__(self, pool: Sequence[Individual], n_parents: int, random: RandomSource) -> list[Individual]:
        return [self.pick(pool, random) for _ in range(n_parents)]


__all__ = ["TournamentSelection", "crowded_comparison", "strength_comparison"]
