"""Strategy configuration module.

Frozen configuration dataclasses and fluent builders for every strategy.

Examples:
    from paretoengine.config import NSGA2Config, MOEADConfig

    cfg = NSGA2Config().pop_size(100).fixed()
    cfg = MOEADConfig.default(pop_size=50)
"""

from typing import Union

from .base import StrategyKind
from .moead import MOEADConfig, MOEADConfigData
from .nsga2 import NSGA2Config, NSGA2ConfigData
from .spea2 import SPEA2Config, SPEA2ConfigData

StrategyConfig = Union[NSGA2ConfigData, SPEA2ConfigData, MOEADConfigData]

__all__ = [
    "StrategyKind",
    "StrategyConfig",
    "NSGA2Config",
    "NSGA2ConfigData",
    "SPEA2Config",
    "SPEA2ConfigData",
    "MOEADConfig",
    "MOEADConfigData",
]
