from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from paretoengine.exceptions import ConfigurationError, InvalidStrategyError


@dataclass(frozen=True)
class Termination:
    """
    Stop predicate checked by the controller at generation boundaries.

    Either limit may be omitted, not both. The run stops as soon as any
    configured limit is reached.
    """

    max_evaluations: Optional[int] = None
    max_generations: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_evaluations is None and self.max_generations is None:
            raise ConfigurationError(
                "Termination needs max_evaluations or max_generations.",
                suggestion="Use ('n_eval', N) or ('n_gen', G)",
            )
        for name in ("max_evaluations", "max_generations"):
            value = getattr(self, name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}.")

    def is_met(self, generation: int, evaluations: int) -> bool:
        if self.max_evaluations is not None and evaluations >= self.max_evaluations:
            return True
        if self.max_generations is not None and generation >= self.max_generations:
            return True
        return False


def parse_termination(termination: Termination | tuple[str, Any]) -> Termination:
    """Accept ``Termination`` or ``("n_eval" | "max_evaluations", N)`` / ``("n_gen" | "max_generations", G)``."""
    if isinstance(termination, Termination):
        return termination
    try:
        kind, value = termination
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Cannot parse termination {termination!r}.") from exc
    key = str(kind).lower()
    if key in {"n_eval", "max_evaluations", "evaluations"}:
        return Termination(max_evaluations=value)
    if key in {"n_gen", "max_generations", "generations"}:
        return Termination(max_generations=value)
    raise InvalidStrategyError(str(kind), ["n_eval", "n_gen"], kind="termination criterion")


__all__ = ["Termination", "parse_termination"]
