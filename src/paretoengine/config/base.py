"""Base utilities for strategy configuration."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Tuple

from paretoengine.exceptions import ConfigurationError, InvalidStrategyError, MissingConfigError


class StrategyKind(str, Enum):
    """Closed family of selection strategies."""

    NSGA2 = "nsga2"
    SPEA2 = "spea2"
    MOEAD = "moead"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "StrategyKind | str") -> "StrategyKind":
        if isinstance(value, StrategyKind):
            return value
        key = str(value).strip().lower().replace("-", "").replace("_", "").replace("/", "")
        aliases = {"nsgaii": "nsga2", "spea": "spea2"}
        key = aliases.get(key, key)
        for kind in cls:
            if kind.value == key:
                return kind
        raise InvalidStrategyError(str(value), [k.value for k in cls])


class _SerializableConfig:
    """Mixin to serialize dataclass configs."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)


def _require_fields(cfg: Dict[str, Any], fields: Tuple[str, ...], name: str) -> None:
    """Validate that required fields are present in configuration."""
    missing = [field for field in fields if cfg.get(field) is None]
    if missing:
        raise MissingConfigError(missing[0], f"{name}Config")


def _check_int(name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}.", details={name: value})
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}.", details={name: value})


def _check_archive_capacity(name: str, capacity: int | None, pop_size: int) -> None:
    if capacity is None:
        return
    _check_int(name, capacity, 1)
    if capacity > pop_size:
        raise ConfigurationError(
            f"{name}={capacity} exceeds the population size {pop_size}.",
            suggestion=f"Use {name} <= pop_size",
            details={name: capacity, "pop_size": pop_size},
        )


__all__ = ["StrategyKind"]
