"""Real-vector collaborators: uniform creator, SBX recombination, polynomial mutation.

Genotypes are 1-D float arrays bounded by ``lower``/``upper``. Every
operator returns fresh arrays and never writes into its inputs.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from paretoengine.exceptions import ConfigurationError
from paretoengine.foundation.random import RandomSource

ArrayLike = Any


def _ensure_bounds(lower: ArrayLike, upper: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    lo = np.asarray(lower, dtype=float).reshape(-1)
    hi = np.asarray(upper, dtype=float).reshape(-1)
    if lo.shape != hi.shape:
        raise ConfigurationError("Lower and upper bounds must have the same shape.")
    if lo.size == 0:
        raise ConfigurationError("Bounds must describe at least one variable.")
    if np.any(lo > hi):
        raise ConfigurationError("Lower bounds must not exceed upper bounds.")
    return lo, hi


def _check_nvars(x: np.ndarray, lower: np.ndarray) -> None:
    if x.shape[-1] != lower.shape[0]:
        raise ValueError(f"Genotype has {x.shape[-1]} variables; bounds describe {lower.shape[0]}.")


class RealCreator:
    """Uniform random vectors inside the bounds."""

    def __init__(self, lower: ArrayLike, upper: ArrayLike) -> None:
        self.lower, self.upper = _ensure_bounds(lower, upper)

    @property
    def n_var(self) -> int:
        return int(self.lower.shape[0])

    def create(self, size: int, random: RandomSource) -> list[np.ndarray]:
        return [
            np.asarray(random.uniform(0.0, 1.0, size=self.n_var), dtype=float) * (self.upper - self.lower) + self.lower
            for _ in range(size)
        ]


class SBXRecombinator:
    """Simulated Binary Crossover (SBX) on one pair of parents, two children."""

    arity = 2
    n_children = 2

    def __init__(self, lower: ArrayLike, upper: ArrayLike, eta: float = 20.0, prob_var: float = 0.5) -> None:
        self.lower, self.upper = _ensure_bounds(lower, upper)
        self.eta = float(eta)
        self.prob_var = float(prob_var)

    def _betaq(self, rand: np.ndarray, beta: np.ndarray) -> np.ndarray:
        eps = 1.0e-14
        beta = np.maximum(beta, eps)
        alpha = np.maximum(2.0 - np.power(beta, -(self.eta + 1.0)), eps)
        inv_eta = 1.0 / (self.eta + 1.0)
        term = rand <= (1.0 / alpha)
        return np.where(
            term,
            np.power(rand * alpha, inv_eta),
            np.power(1.0 / np.maximum(2.0 - rand * alpha, eps), inv_eta),
        )

    def recombine(self, parents: Sequence[np.ndarray], random: RandomSource) -> list[np.ndarray]:
        p1 = np.asarray(parents[0], dtype=float)
        p2 = np.asarray(parents[1], dtype=float)
        _check_nvars(p1, self.lower)
        _check_nvars(p2, self.lower)
        n_var = p1.shape[0]
        eps = 1.0e-14

        y1 = np.minimum(p1, p2)
        y2 = np.maximum(p1, p2)
        diff = y2 - y1
        active = diff > eps
        if self.prob_var < 1.0:
            active &= np.asarray(random.uniform(0.0, 1.0, size=n_var)) <= self.prob_var
        child1 = p1.copy()
        child2 = p2.copy()
        if not np.any(active):
            return [child1, child2]

        rand = np.asarray(random.uniform(0.0, 1.0, size=n_var))
        safe = diff.clip(min=eps)
        betaq = self._betaq(rand, 1.0 + 2.0 * (y1 - self.lower) / safe)
        c1 = 0.5 * ((y1 + y2) - betaq * diff)
        betaq = self._betaq(rand, 1.0 + 2.0 * (self.upper - y2) / safe)
        c2 = 0.5 * ((y1 + y2) + betaq * diff)
        c1 = np.clip(c1, self.lower, self.upper)
        c2 = np.clip(c2, self.lower, self.upper)

        swap = (np.asarray(random.uniform(0.0, 1.0, size=n_var)) <= 0.5) & active
        child1 = np.where(active, np.where(swap, c2, c1), child1)
        child2 = np.where(active, np.where(swap, c1, c2), child2)
        return [child1, child2]


class PolynomialMutator:
    """Standard polynomial mutation used in NSGA-II; per-variable probability defaults to 1/n_var."""

    def __init__(self, lower: ArrayLike, upper: ArrayLike, prob: float | None = None, eta: float = 20.0) -> None:
        self.lower, self.upper = _ensure_bounds(lower, upper)
        self.prob = float(prob) if prob is not None else 1.0 / self.lower.shape[0]
        self.eta = float(eta)

    def mutate(self, genotype: np.ndarray, random: RandomSource) -> np.ndarray:
        x = np.array(genotype, dtype=float)
        _check_nvars(x, self.lower)
        n_var = x.shape[0]
        # Two full draws (mask then delta) so random consumption does not depend on the mask.
        rnd_mask = np.asarray(random.uniform(0.0, 1.0, size=n_var))
        rnd_delta = np.asarray(random.uniform(0.0, 1.0, size=n_var))
        mask = (rnd_mask <= self.prob) & (self.upper > self.lower)
        if not np.any(mask):
            return x

        mut_pow = 1.0 / (self.eta + 1.0)
        for j in np.flatnonzero(mask):
            yl, yu = self.lower[j], self.upper[j]
            y = x[j]
            delta1 = (y - yl) / (yu - yl)
            delta2 = (yu - y) / (yu - yl)
            rnd = rnd_delta[j]
            if rnd <= 0.5:
                xy = 1.0 - delta1
                val = 2.0 * rnd + (1.0 - 2.0 * rnd) * (xy ** (self.eta + 1.0))
                deltaq = val**mut_pow - 1.0
            else:
                xy = 1.0 - delta2
                val = 2.0 * (1.0 - rnd) + 2.0 * (rnd - 0.5) * (xy ** (self.eta + 1.0))
                deltaq = 1.0 - val**mut_pow
            x[j] = min(max(y + deltaq * (yu - yl), yl), yu)
        return x


__all__ = ["RealCreator", "SBXRecombinator", "PolynomialMutator"]
