from __future__ import annotations

import math
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Any, Optional, Sequence

import numpy as np

from paretoengine.exceptions import EvaluationError, InvalidStrategyError

from . import EvaluationBackend, EvaluationResult, Evaluator


def _as_row(values: Any, genotype: Any) -> np.ndarray:
    try:
        row = np.asarray(values, dtype=float).reshape(-1)
    except (TypeError, ValueError) as exc:
        raise EvaluationError(f"Evaluator returned a non-numeric fitness: {values!r}.", genotype) from exc
    return row


def _is_constrained(evaluator: Evaluator) -> bool:
    return callable(getattr(evaluator, "constraints", None))


def _eval_chunk(evaluator: Evaluator, genotypes: Sequence[Any]) -> tuple[list[np.ndarray], list[np.ndarray]]:
    """Worker helper to evaluate a chunk; kept at module level for pickling."""
    rows = [_as_row(evaluator.evaluate(g), g) for g in genotypes]
    g_rows: list[np.ndarray] = []
    if _is_constrained(evaluator):
        g_rows = [_as_row(evaluator.constraints(g), g) for g in genotypes]
    return rows, g_rows


def _stack(rows: list[np.ndarray], genotypes: Sequence[Any], what: str = "fitness") -> np.ndarray:
    if not rows:
        return np.empty((0, 0), dtype=float)
    width = rows[0].shape[0]
    for row, g in zip(rows, genotypes):
        if row.shape[0] != width:
            raise EvaluationError(
                f"Evaluator returned {what} vectors of different lengths ({width} and {row.shape[0]}).",
                g,
            )
    return np.vstack(rows)


def validate_fitness(F: np.ndarray, n_obj: int, genotypes: Sequence[Any] | None = None) -> np.ndarray:
    """
    Reject a batch that cannot be ranked.

    Raises EvaluationError when a row has the wrong number of objectives or
    holds NaN/inf. The first offending genotype is attached to the error.
    """
    F = np.asarray(F, dtype=float)
    n = len(genotypes) if genotypes is not None else F.shape[0]
    if n == 0:
        return np.empty((0, n_obj), dtype=float)
    if F.ndim != 2 or F.shape[1] != n_obj:
        width = F.shape[1] if F.ndim == 2 else F.shape
        raise EvaluationError(
            f"Evaluator returned {width} objective values per individual; expected {n_obj}.",
            genotypes[0] if genotypes else None,
        )
    if F.shape[0] != n:
        raise EvaluationError(f"Backend returned {F.shape[0]} fitness rows for {n} genotypes.")
    bad = np.flatnonzero(~np.isfinite(F).all(axis=1))
    if bad.size:
        i = int(bad[0])
        raise EvaluationError(
            f"Evaluator returned a non-finite fitness {F[i].tolist()} ({bad.size} of {n} rows affected).",
            genotypes[i] if genotypes is not None else None,
        )
    return F


def validate_constraints(G: np.ndarray, n: int, genotypes: Sequence[Any] | None = None) -> np.ndarray:
    """Reject a constraint matrix with the wrong row count or NaN values; +inf is an allowed violation."""
    G = np.asarray(G, dtype=float)
    if G.ndim != 2 or G.shape[0] != n:
        raise EvaluationError(f"Backend returned constraint values of shape {G.shape} for {n} genotypes.")
    bad = np.flatnonzero(np.isnan(G).any(axis=1))
    if bad.size:
        i = int(bad[0])
        raise EvaluationError(
            f"Evaluator returned NaN constraint values {G[i].tolist()}.",
            genotypes[i] if genotypes is not None else None,
        )
    return G


def _result(rows: list[np.ndarray], g_rows: list[np.ndarray], genotypes: Sequence[Any]) -> EvaluationResult:
    G = _stack(g_rows, genotypes, what="constraint") if g_rows else None
    return EvaluationResult(F=_stack(rows, genotypes), G=G)


class SerialEvalBackend(EvaluationBackend):
    """Synchronous in-process evaluation (default)."""

    def evaluate(self, genotypes: Sequence[Any], evaluator: Evaluator) -> EvaluationResult:
        rows, g_rows = _eval_chunk(evaluator, genotypes)
        return _result(rows, g_rows, genotypes)

    def close(self) -> None:
        return None


class MultiprocessingEvalBackend(EvaluationBackend):
    """
    Parallel evaluation using a process pool.

    Genotypes are split into contiguous chunks by position, one task per
    chunk, and the results are put back in submission order. Fitness is
    written to individuals by the caller, in the parent process, once the
    whole batch is back.

    Notes:
        - Requires the evaluator and the genotypes to be picklable.
        - Best suited for expensive evaluations; overhead dominates for tiny problems.
    """

    def __init__(self, n_workers: Optional[int] = None, chunk_size: Optional[int] = None):
        self.n_workers = max(1, n_workers or os.cpu_count() or 1)
        self.chunk_size = chunk_size

    def chunks(self, n: int) -> list[tuple[int, int]]:
        if self.chunk_size is not None and self.chunk_size > 0:
            chunk_size = self.chunk_size
        else:
            chunk_size = max(1, math.ceil(n / self.n_workers))
        return [(i, min(i + chunk_size, n)) for i in range(0, n, chunk_size)]

    def evaluate(self, genotypes: Sequence[Any], evaluator: Evaluator) -> EvaluationResult:
        genotypes = list(genotypes)
        if self.n_workers <= 1 or len(genotypes) <= 1:
            return SerialEvalBackend().evaluate(genotypes, evaluator)

        parts: list[tuple[int, tuple[list[np.ndarray], list[np.ndarray]]]] = []
        with ProcessPoolExecutor(max_workers=self.n_workers) as ex:
            future_map = {
                ex.submit(_eval_chunk, evaluator, genotypes[start:end]): start for start, end in self.chunks(len(genotypes))
            }
            for fut in as_completed(future_map):
                parts.append((future_map[fut], fut.result()))

        # Restore original order
        rows: list[np.ndarray] = []
        g_rows: list[np.ndarray] = []
        for _, (part, g_part) in sorted(parts, key=lambda p: p[0]):
            rows.extend(part)
            g_rows.extend(g_part)
        return _result(rows, g_rows, genotypes)

    def close(self) -> None:
        return None


def resolve_eval_backend(
    name: str | None, *, n_workers: Optional[int] = None, chunk_size: Optional[int] = None
) -> EvaluationBackend:
    key = (name or "serial").lower()
    if key == "serial":
        return SerialEvalBackend()
    if key == "multiprocessing":
        return MultiprocessingEvalBackend(n_workers=n_workers, chunk_size=chunk_size)
    raise InvalidStrategyError(str(name), ["serial", "multiprocessing"], kind="evaluation backend")


def evaluate_batch_with_constraints(
    genotypes: Sequence[Any],
    evaluator: Evaluator,
    n_obj: int,
    backend: EvaluationBackend | None = None,
) -> tuple[np.ndarray, np.ndarray | None]:
    """
    Evaluate and validate one batch; blocks until every row is back.

    Returns the objective matrix and the constraint matrix, the latter None
    when the evaluator defines no constraints.
    """
    backend = backend or SerialEvalBackend()
    result = backend.evaluate(genotypes, evaluator)
    F = validate_fitness(result.F, n_obj, genotypes)
    G = None
    if result.G is not None and len(genotypes):
        G = validate_constraints(result.G, len(genotypes), genotypes)
    return F, G


def evaluate_batch(
    genotypes: Sequence[Any],
    evaluator: Evaluator,
    n_obj: int,
    backend: EvaluationBackend | None = None,
) -> np.ndarray:
    """Objective matrix of one validated batch."""
    return evaluate_batch_with_constraints(genotypes, evaluator, n_obj, backend)[0]


__all__ = [
    "SerialEvalBackend",
    "MultiprocessingEvalBackend",
    "resolve_eval_backend",
    "validate_fitness",
    "validate_constraints",
    "evaluate_batch",
    "evaluate_batch_with_constraints",
]
