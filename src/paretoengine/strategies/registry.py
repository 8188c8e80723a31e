"""
Strategy factory.

Maps the closed ``StrategyKind`` family to constructors once, at setup time.
Nothing downstream looks a strategy up by name again.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from difflib import get_close_matches
from typing import Any

from paretoengine.config import (
    MOEADConfig,
    MOEADConfigData,
    NSGA2Config,
    NSGA2ConfigData,
    SPEA2Config,
    SPEA2ConfigData,
    StrategyConfig,
    StrategyKind,
)
from paretoengine.exceptions import ConfigurationError, InvalidStrategyError
from paretoengine.foundation.objectives import ObjectiveSpace

from .base import Strategy
from .moead import MOEAD
from .nsga2 import NSGA2
from .spea2 import SPEA2

StrategyBuilder = Callable[[Any, ObjectiveSpace], Strategy]

_BUILDERS: dict[StrategyKind, tuple[type, StrategyBuilder]] = {
    StrategyKind.NSGA2: (NSGA2ConfigData, NSGA2),
    StrategyKind.SPEA2: (SPEA2ConfigData, SPEA2),
    StrategyKind.MOEAD: (MOEADConfigData, MOEAD),
}

_FROM_DICT: dict[StrategyKind, Callable[[dict[str, Any]], StrategyConfig]] = {
    StrategyKind.NSGA2: NSGA2Config.from_dict,
    StrategyKind.SPEA2: SPEA2Config.from_dict,
    StrategyKind.MOEAD: MOEADConfig.from_dict,
}


def available_strategies() -> list[str]:
    return [kind.value for kind in StrategyKind]


def _suggest(name: str) -> list[str]:
    return get_close_matches(name.lower(), available_strategies(), n=3, cutoff=0.6)


def config_from_mapping(kind: StrategyKind | str, values: Mapping[str, Any]) -> StrategyConfig:
    """Build the frozen config of ``kind`` from plain data (e.g. a parsed settings file)."""
    try:
        parsed = StrategyKind.parse(kind)
    except InvalidStrategyError as exc:
        suggestions = _suggest(str(kind))
        if suggestions:
            raise InvalidStrategyError(str(kind), suggestions) from exc
        raise
    return _FROM_DICT[parsed](dict(values))


def build_strategy(config: StrategyConfig, space: ObjectiveSpace) -> Strategy:
    """Validate ``config`` against ``space`` and construct the matching strategy."""
    kind = getattr(config, "kind", None)
    if not isinstance(kind, StrategyKind):
        raise ConfigurationError(
            f"Unsupported configuration object {type(config).__name__}.",
            suggestion="Build configs with NSGA2Config, SPEA2Config or MOEADConfig",
        )
    data_type, builder = _BUILDERS[kind]
    if not isinstance(config, data_type):
        raise ConfigurationError(f"{kind.value} expects {data_type.__name__}, got {type(config).__name__}.")
    return builder(config, space)


__all__ = ["build_strategy", "config_from_mapping", "available_strategies"]
