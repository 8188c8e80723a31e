from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class Evaluator(Protocol):
    """
    Pure objective function over a genotype. May expose ``n_obj``.

    A constrained problem also exposes ``constraints(genotype)`` returning one
    value per constraint, where g <= 0 means satisfied.
    """

    def evaluate(self, genotype: Any) -> Sequence[float]: ...


@dataclass
class EvaluationResult:
    """Objective matrix (and constraint matrix, if any) for one batch, rows in submission order."""

    F: np.ndarray
    G: Optional[np.ndarray] = None


class EvaluationBackend(Protocol):
    """Protocol for evaluation backends."""

    def evaluate(self, genotypes: Sequence[Any], evaluator: Evaluator) -> EvaluationResult: ...

    def close(self) -> None:  # pragma: no cover - optional for pooled backends
        """Clean up any resources (executors, pools)."""
        return None


from .backends import (  # noqa: E402
    MultiprocessingEvalBackend,
    SerialEvalBackend,
    evaluate_batch,
    evaluate_batch_with_constraints,
    resolve_eval_backend,
    validate_constraints,
    validate_fitness,
)

__all__ = [
    "Evaluator",
    "EvaluationBackend",
    "EvaluationResult",
    "SerialEvalBackend",
    "MultiprocessingEvalBackend",
    "resolve_eval_backend",
    "validate_fitness",
    "validate_constraints",
    "evaluate_batch",
    "evaluate_batch_with_constraints",
]
