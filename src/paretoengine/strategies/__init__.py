"""Selection strategies: NSGA-II, SPEA2 and MOEA/D behind one interface."""

from .base import Mating, Strategy
from .moead import MOEAD
from .nsga2 import NSGA2
from .registry import available_strategies, build_strategy, config_from_mapping
from .selection import TournamentSelection, crowded_comparison, strength_comparison
from .spea2 import SPEA2

__all__ = [
    "Strategy",
    "Mating",
    "NSGA2",
    "SPEA2",
    "MOEAD",
    "build_strategy",
    "config_from_mapping",
    "available_strategies",
    "TournamentSelection",
    "crowded_comparison",
    "strength_comparison",
]
