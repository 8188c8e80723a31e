"""
Random source capability.

Every stochastic decision in the engine (tournaments, neighbour shuffles,
variation) draws from a ``RandomSource`` handed in by the caller. Nothing
reads module-level random state.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, TypeVar, runtime_checkable

import numpy as np

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Minimal capability consumed by strategies and operators."""

    def uniform(self, low: float = 0.0, high: float = 1.0, size: int | tuple[int, ...] | None = None) -> Any: ...

    def choose(self, low: int, high: int) -> int:
        """Integer in ``[low, high)``."""
        ...


class NumpyRandomSource:
    """``RandomSource`` backed by ``numpy.random.Generator``."""

    def __init__(self, seed: int | np.random.Generator | None = None) -> None:
        if isinstance(seed, np.random.Generator):
            self.generator = seed
        else:
            self.generator = np.random.default_rng(seed)

    def uniform(self, low: float = 0.0, high: float = 1.0, size: int | tuple[int, ...] | None = None) -> Any:
        if size is None:
            return float(self.generator.uniform(low, high))
        return self.generator.uniform(low, high, size=size)

    def choose(self, low: int, high: int) -> int:
        if high <= low:
            raise ValueError(f"Empty integer range [{low}, {high}).")
        return int(self.generator.integers(low, high))

    def __repr__(self) -> str:
        return f"NumpyRandomSource({self.generator.bit_generator.__class__.__name__})"


def coin(random: RandomSource) -> bool:
    """Fair coin flip through the narrow ``uniform`` contract."""
    return float(random.uniform(0.0, 1.0)) < 0.5


def shuffled(items: Sequence[T], random: RandomSource) -> list[T]:
    """Fisher-Yates shuffle driven by ``random.choose``; the input is left untouched."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = random.choose(0, i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def distinct_indices(count: int, low: int, high: int, random: RandomSource) -> list[int]:
    """``count`` distinct integers from ``[low, high)`` in draw order."""
    if high - low < count:
        raise ValueError(f"Cannot draw {count} distinct values from [{low}, {high}).")
    chosen: list[int] = []
    while len(chosen) < count:
        value = random.choose(low, high)
        if value not in chosen:
            chosen.append(value)
    return chosen


def as_random_source(seed: RandomSource | int | None) -> RandomSource:
    if seed is None or isinstance(seed, (int, np.integer)):
        return NumpyRandomSource(None if seed is None else int(seed))
    return seed


__all__ = ["RandomSource", "NumpyRandomSource", "coin", "shuffled", "distinct_indices", "as_random_source"]
