from .archive import ParetoArchive
from .config import (
    MOEADConfig,
    NSGA2Config,
    SPEA2Config,
    StrategyKind,
)
from .decomposition import Aggregation, DecompositionEngine, weight_vectors
from .eval import MultiprocessingEvalBackend, SerialEvalBackend
from .exceptions import (
    ConfigurationError,
    EvaluationError,
    InvalidStrategyError,
    InvariantViolationError,
    MissingConfigError,
    ObjectiveCountError,
    OptimizationError,
    ParetoEngineError,
)
from .foundation import (
    DensityKind,
    Direction,
    Dominance,
    Individual,
    NumpyRandomSource,
    ObjectiveSpace,
    compare,
    crowding_distance,
    dominates,
    hypervolume,
    knn_density,
    non_dominated_sort,
)
from .loop import GenerationalLoop, LoopState, RunSnapshot, optimize
from .operators import PolynomialMutator, RealCreator, SBXRecombinator
from .strategies import MOEAD, NSGA2, SPEA2, Mating, Strategy, build_strategy
from .termination import Termination
from .variation import VariationPipeline

__version__ = "0.1.0"

__all__ = [
    "optimize",
    "GenerationalLoop",
    "LoopState",
    "RunSnapshot",
    "Termination",
    "ObjectiveSpace",
    "Direction",
    "Individual",
    "Dominance",
    "compare",
    "dominates",
    "non_dominated_sort",
    "crowding_distance",
    "knn_density",
    "DensityKind",
    "hypervolume",
    "ParetoArchive",
    "DecompositionEngine",
    "Aggregation",
    "weight_vectors",
    "Strategy",
    "Mating",
    "NSGA2",
    "SPEA2",
    "MOEAD",
    "build_strategy",
    "StrategyKind",
    "NSGA2Config",
    "SPEA2Config",
    "MOEADConfig",
    "VariationPipeline",
    "RealCreator",
    "SBXRecombinator",
    "PolynomialMutator",
    "SerialEvalBackend",
    "MultiprocessingEvalBackend",
    "NumpyRandomSource",
    "ParetoEngineError",
    "ConfigurationError",
    "MissingConfigError",
    "InvalidStrategyError",
    "ObjectiveCountError",
    "OptimizationError",
    "EvaluationError",
    "InvariantViolationError",
]
