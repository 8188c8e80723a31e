"""
paretoengine exception hierarchy.

Every error raised by the engine inherits from ParetoEngineError and carries
an optional suggestion plus a details dict for programmatic inspection.

Example:
    try:
        snapshot = optimize(config, space, creator, evaluator, variation, ("n_eval", 5000))
    except ConfigurationError as e:
        print(f"Setup rejected: {e.message}")
        print(f"Suggestion: {e.suggestion}")
"""

from __future__ import annotations

from typing import Any


class ParetoEngineError(Exception):
    """
    Base exception for all paretoengine errors.

    Attributes:
        message: Human-readable error description
        suggestion: Optional suggestion for fixing the error
        details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ParetoEngineError):
    """Raised when configuration is invalid or incomplete. Always fatal, always before evaluation."""

    pass


class InvalidStrategyError(ConfigurationError):
    """Raised when an unknown strategy or strategy option is requested."""

    def __init__(self, name: str, available: list[str] | None = None, kind: str = "strategy") -> None:
        available = available or ["nsga2", "spea2", "moead"]
        message = f"Unknown {kind} '{name}'."
        suggestion = f"Available: {', '.join(available)}"
        super().__init__(message, suggestion, {kind: name, "available": available})


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, field: str, config_class: str | None = None) -> None:
        message = f"Missing required configuration: '{field}'."
        suggestion = f"Add '{field}' to your configuration"
        if config_class:
            suggestion += f" or use {config_class}.default() for sensible defaults"
        super().__init__(message, suggestion, {"field": field})


class ObjectiveCountError(ConfigurationError):
    """Raised when a collaborator disagrees with the configured number of objectives."""

    def __init__(self, expected: int, actual: int, source: str) -> None:
        message = f"{source} reports {actual} objectives but the objective space has {expected}."
        suggestion = "Make the ObjectiveSpace directions match the evaluator's objective count"
        super().__init__(message, suggestion, {"expected": expected, "actual": actual, "source": source})


# =============================================================================
# Runtime Errors
# =============================================================================


class OptimizationError(ParetoEngineError):
    """Raised when optimization fails during execution."""

    pass


class EvaluationError(OptimizationError):
    """Raised when an evaluator returns a fitness vector the engine cannot rank."""

    def __init__(self, message: str, genotype: Any = None) -> None:
        suggestion = "Check your evaluator's evaluate() function: it must return one finite value per objective"
        super().__init__(message, suggestion, {"genotype": genotype})


class InvariantViolationError(OptimizationError):
    """Raised when an internal invariant does not hold after an operation (a defect, never retried)."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message, None, details)


__all__ = [
    "ParetoEngineError",
    # Configuration
    "ConfigurationError",
    "InvalidStrategyError",
    "MissingConfigError",
    "ObjectiveCountError",
    # Runtime
    "OptimizationError",
    "EvaluationError",
    "InvariantViolationError",
]
