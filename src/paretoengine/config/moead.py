"""MOEA/D configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from paretoengine.decomposition.engine import NEIGHBOR_METRICS
from paretoengine.decomposition.scalarizing import Aggregation
from paretoengine.exceptions import ConfigurationError, InvalidStrategyError
from paretoengine.foundation.objectives import ObjectiveSpace

from .base import StrategyKind, _check_archive_capacity, _check_int, _SerializableConfig, _require_fields


@dataclass(frozen=True)
class MOEADConfigData(_SerializableConfig):
    pop_size: int
    neighbor_size: int = 10
    max_replacements: int = 2
    aggregation: str = "tchebycheff"
    theta: float = 5.0
    divisions: Optional[int] = None
    neighbor_metric: str = "angular"
    # None bounds the Pareto set by the number of sub-problems.
    pareto_set_capacity: Optional[int] = None

    @property
    def kind(self) -> StrategyKind:
        return StrategyKind.MOEAD

    def validate(self, space: ObjectiveSpace) -> "MOEADConfigData":
        """
        Setup-time checks for the decomposition.

        The number of sub-problems equals ``pop_size``. The neighbourhood
        includes the sub-problem itself and must be strictly smaller than the
        number of sub-problems; replacements per offspring are bounded by it.
        """
        _check_int("pop_size", self.pop_size, 2)
        if space.n_obj < 2:
            raise ConfigurationError(
                "MOEA/D needs at least two objectives to decompose.",
                details={"n_obj": space.n_obj},
            )
        _check_int("neighbor_size", self.neighbor_size, 1)
        if self.neighbor_size >= self.pop_size:
            raise ConfigurationError(
                f"neighbor_size={self.neighbor_size} must be smaller than the number of sub-problems ({self.pop_size}).",
                suggestion="Lower neighbor_size or raise pop_size",
                details={"neighbor_size": self.neighbor_size, "n_subproblems": self.pop_size},
            )
        _check_int("max_replacements", self.max_replacements, 1)
        if self.max_replacements > self.neighbor_size:
            raise ConfigurationError(
                f"max_replacements={self.max_replacements} exceeds neighbor_size={self.neighbor_size}.",
                details={"max_replacements": self.max_replacements, "neighbor_size": self.neighbor_size},
            )
        Aggregation.parse(self.aggregation)
        if self.neighbor_metric not in NEIGHBOR_METRICS:
            raise InvalidStrategyError(self.neighbor_metric, list(NEIGHBOR_METRICS), kind="neighbourhood metric")
        if self.divisions is not None:
            _check_int("divisions", self.divisions, 1)
        if not self.theta > 0:
            raise ConfigurationError(f"theta must be > 0, got {self.theta}.")
        _check_archive_capacity("pareto_set_capacity", self.pareto_set_capacity, self.pop_size)
        return self


class MOEADConfig:
    """
    Declarative configuration holder for MOEA/D settings.

    Examples:
        # Fluent builder
        cfg = MOEADConfig().pop_size(100).neighbor_size(20).fixed()

        # Quick default configuration
        cfg = MOEADConfig.default()

        # From dictionary
        cfg = MOEADConfig.from_dict({"pop_size": 100, "neighbor_size": 20})
    """

    def __init__(self) -> None:
        self._cfg: Dict[str, Any] = {}

    @classmethod
    def default(cls, pop_size: int = 100) -> MOEADConfigData:
        """Tchebycheff decomposition, t=10, at most 2 replacements per offspring."""
        return (
            cls()
            .pop_size(pop_size)
            .neighbor_size(min(10, pop_size - 1))
            .max_replacements(2)
            .aggregation("tchebycheff")
            .fixed()
        )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> MOEADConfigData:
        builder = cls()
        for key in (
            "pop_size",
            "neighbor_size",
            "max_replacements",
            "theta",
            "divisions",
            "neighbor_metric",
            "pareto_set_capacity",
        ):
            if key in config:
                getattr(builder, key)(config[key])
        if "aggregation" in config:
            agg = config["aggregation"]
            if isinstance(agg, tuple):
                builder.aggregation(agg[0], **agg[1])
            elif isinstance(agg, dict):
                agg = dict(agg)
                method = agg.pop("method", agg.pop("type", "tchebycheff"))
                builder.aggregation(method, **agg)
            else:
                builder.aggregation(agg)
        return builder.fixed()

    def pop_size(self, value: int) -> "MOEADConfig":
        self._cfg["pop_size"] = value
        return self

    def neighbor_size(self, value: int) -> "MOEADConfig":
        self._cfg["neighbor_size"] = value
        return self

    def max_replacements(self, value: int) -> "MOEADConfig":
        self._cfg["max_replacements"] = value
        return self

    def aggregation(self, method: str, **kwargs) -> "MOEADConfig":
        self._cfg["aggregation"] = str(Aggregation.parse(method))
        if "theta" in kwargs:
            self._cfg["theta"] = float(kwargs["theta"])
        return self

    def theta(self, value: float) -> "MOEADConfig":
        self._cfg["theta"] = float(value)
        return self

    def divisions(self, value: int | None) -> "MOEADConfig":
        self._cfg["divisions"] = value
        return self

    def neighbor_metric(self, value: str) -> "MOEADConfig":
        self._cfg["neighbor_metric"] = str(value)
        return self

    def pareto_set_capacity(self, value: int | None) -> "MOEADConfig":
        self._cfg["pareto_set_capacity"] = value
        return self

    def fixed(self) -> MOEADConfigData:
        _require_fields(self._cfg, ("pop_size",), "MOEAD")
        return MOEADConfigData(
            pop_size=self._cfg["pop_size"],
            neighbor_size=self._cfg.get("neighbor_size", 10),
            max_replacements=self._cfg.get("max_replacements", 2),
            aggregation=self._cfg.get("aggregation", "tchebycheff"),
            theta=self._cfg.get("theta", 5.0),
            divisions=self._cfg.get("divisions"),
            neighbor_metric=self._cfg.get("neighbor_metric", "angular"),
            pareto_set_capacity=self._cfg.get("pareto_set_capacity"),
        )


__all__ = ["MOEADConfig", "MOEADConfigData"]
