"""NSGA-II configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from paretoengine.foundation.objectives import ObjectiveSpace

from .base import StrategyKind, _check_int, _SerializableConfig, _require_fields


@dataclass(frozen=True)
class NSGA2ConfigData(_SerializableConfig):
    pop_size: int
    tournament_size: int = 2

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.NSGA2

    def validate(self, space: ObjectiveSpace) -> "NSGA2ConfigData":
        """Cross-field checks; raises ConfigurationError before any evaluation happens."""
        _check_int("pop_size", self.pop_size, 2)
        _check_int("tournament_size", self.tournament_size, 2)
        return self


class NSGA2Config:
    """
    Declarative configuration holder for NSGA-II.
    Provides a fluent builder that yields an immutable NSGA2ConfigData.

    Examples:
        cfg = NSGA2Config().pop_size(100).fixed()
        cfg = NSGA2Config.default()
        cfg = NSGA2Config.from_dict({"pop_size": 100})
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls, pop_size: int = 100) -> NSGA2ConfigData:
        return cls().pop_size(pop_size).tournament_size(2).fixed()

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> NSGA2ConfigData:
        builder = cls()
        if "pop_size" in config:
            builder.pop_size(config["pop_size"])
        if "tournament_size" in config:
            builder.tournament_size(config["tournament_size"])
        return builder.fixed()

    def pop_size(self, value: int) -> "NSGA2Config":
        self._cfg["pop_size"] = value
        return self

    def tournament_size(self, value: int) -> "NSGA2Config":
        self._cfg["tournament_size"] = value
        return self

    def fixed(self) -> NSGA2ConfigData:
        _require_fields(self._cfg, ("pop_size",), "NSGA2")
        return NSGA2ConfigData(
            pop_size=self._cfg["pop_size"],
            tournament_size=self._cfg.get("tournament_size", 2),
        )


__all__ = ["NSGA2Config", "NSGA2ConfigData"]
