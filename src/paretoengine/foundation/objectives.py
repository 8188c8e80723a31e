"""Objective directions and the immutable objective-space context."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

import numpy as np

from paretoengine.exceptions import ConfigurationError, InvalidStrategyError


class Direction(str, Enum):
    MINIMIZE = "min"
    MAXIMIZE = "max"

    @classmethod
    def parse(cls, value: "Direction | str") -> "Direction":
        if isinstance(value, Direction):
            return value
        key = str(value).strip().lower()
        if key in {"min", "minimize", "minimise"}:
            return cls.MINIMIZE
        if key in {"max", "maximize", "maximise"}:
            return cls.MAXIMIZE
        raise InvalidStrategyError(str(value), ["min", "max"], kind="objective direction")


@dataclass(frozen=True)
class ObjectiveSpace:
    """
    Number of objectives and their directions, computed once per run.

    Strategies work internally in minimization space: every fitness matrix is
    multiplied by ``signs`` (+1 for minimized, -1 for maximized objectives)
    before dominance, density or scalarization is computed.
    """

    directions: tuple[Direction, ...]
    signs: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.directions) < 1:
            raise ConfigurationError("An objective space needs at least one objective.")
        signs = np.array([1.0 if d is Direction.MINIMIZE else -1.0 for d in self.directions], dtype=float)
        signs.setflags(write=False)
        object.__setattr__(self, "signs", signs)

    @classmethod
    def from_directions(cls, directions: Iterable[Direction | str]) -> "ObjectiveSpace":
        return cls(tuple(Direction.parse(d) for d in directions))

    @classmethod
    def minimize(cls, n_obj: int) -> "ObjectiveSpace":
        if n_obj < 1:
            raise ConfigurationError(f"n_obj must be >= 1, got {n_obj}.")
        return cls((Direction.MINIMIZE,) * int(n_obj))

    @property
    def n_obj(self) -> int:
        return len(self.directions)

    def to_minimization(self, F: np.ndarray | Sequence[float]) -> np.ndarray:
        """Map fitness values (vector or matrix) into minimization space."""
        arr = np.asarray(F, dtype=float)
        if arr.shape[-1] != self.n_obj:
            raise ValueError(f"Expected {self.n_obj} objective values, got {arr.shape[-1]}.")
        return arr * self.signs

    def from_minimization(self, F: np.ndarray) -> np.ndarray:
        """Inverse of to_minimization (the sign map is its own inverse)."""
        return np.asarray(F, dtype=float) * self.signs


__all__ = ["Direction", "ObjectiveSpace"]
