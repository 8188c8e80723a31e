"""SPEA2 configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from paretoengine.foundation.objectives import ObjectiveSpace

from .base import StrategyKind, _check_archive_capacity, _check_int, _SerializableConfig, _require_fields


@dataclass(frozen=True)
class SPEA2ConfigData(_SerializableConfig):
    pop_size: int
    archive_size: int
    k_neighbors: Optional[int] = None
    tournament_size: int = 2

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.SPEA2

    @property
    def effective_k(self) -> int:
        """k for the nearest-neighbour density: floor(sqrt(pop_size + archive_size)) unless set."""
        if self.k_neighbors is not None:
            return int(self.k_neighbors)
        return max(1, int(np.sqrt(self.pop_size + self.archive_size)))

    def validate(self, space: ObjectiveSpace) -> "SPEA2ConfigData":
        _check_int("pop_size", self.pop_size, 2)
        _check_archive_capacity("archive_size", self.archive_size, self.pop_size)
        if self.k_neighbors is not None:
            _check_int("k_neighbors", self.k_neighbors, 1)
        _check_int("tournament_size", self.tournament_size, 2)
        return self


class SPEA2Config:
    """
    Declarative configuration holder for SPEA2 settings.

    Examples:
        cfg = SPEA2Config.default()
        cfg = SPEA2Config().pop_size(100).archive_size(100).fixed()
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls, pop_size: int = 100) -> SPEA2ConfigData:
        """Archive as large as the population, k derived from both sizes."""
        return cls().pop_size(pop_size).archive_size(pop_size).fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> SPEA2ConfigData:
        builder = cls()
        for key in ("pop_size", "archive_size", "k_neighbors", "tournament_size"):
            if key in config:
                getattr(builder, key)(config[key])
        return builder.fixed()

    def pop_size(self, value: int) -> "SPEA2Config":
        self._cfg["pop_size"] = value
        return self

    def archive_size(self, value: int) -> "SPEA2Config":
        self._cfg["archive_size"] = value
        return self

    def k_neighbors(self, value: int) -> "SPEA2Config":
        self._cfg["k_neighbors"] = value
        return self

    def tournament_size(self, value: int) -> "SPEA2Config":
        self._cfg["tournament_size"] = value
        return self

    def fixed(self) -> SPEA2ConfigData:
        _require_fields(self._cfg, ("pop_size", "archive_size"), "SPEA2")
        return SPEA2ConfigData(
            pop_size=self._cfg["pop_size"],
            archive_size=self._cfg["archive_size"],
            k_neighbors=self._cfg.get("k_neighbors"),
            tournament_size=self._cfg.get("tournament_size", 2),
        )


__all__ = ["SPEA2Config", "SPEA2ConfigData"]
