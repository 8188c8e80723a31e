"""Tests for the paretoengine exception hierarchy."""

from __future__ import annotations

import pytest


class TestParetoEngineError:
    """Test base ParetoEngineError class."""

    def test_basic_error(self):
        """ParetoEngineError should work with just a message."""
        from paretoengine.exceptions import ParetoEngineError

        err = ParetoEngineError("Something went wrong")
        assert "Something went wrong" in str(err)
        assert err.message == "Something went wrong"
        assert err.suggestion is None
        assert err.details == {}

    def test_error_with_suggestion(self):
        from paretoengine.exceptions import ParetoEngineError

        err = ParetoEngineError("Something went wrong", suggestion="Try this instead")
        assert "Suggestion: Try this instead" in str(err)
        assert err.suggestion == "Try this instead"

    def test_error_with_details(self):
        from paretoengine.exceptions import ParetoEngineError

        err = ParetoEngineError("Error", details={"key": "value"})
        assert err.details == {"key": "value"}


class TestConfigurationErrors:
    """Test configuration-related errors."""

    def test_invalid_strategy_error(self):
        """InvalidStrategyError should list available strategies."""
        from paretoengine.exceptions import InvalidStrategyError

        err = InvalidStrategyError("nsga3")
        assert "nsga3" in str(err)
        assert "moead" in str(err)
        assert err.details["available"] == ["nsga2", "spea2", "moead"]

    def test_invalid_strategy_error_custom_kind(self):
        from paretoengine.exceptions import InvalidStrategyError

        err = InvalidStrategyError("manhattan", available=["angular", "euclidean"], kind="neighbor metric")
        assert "Unknown neighbor metric 'manhattan'" in str(err)
        assert "angular, euclidean" in str(err)

    def test_missing_config_error(self):
        from paretoengine.exceptions import MissingConfigError

        err = MissingConfigError("pop_size", config_class="NSGA2Config")
        assert "pop_size" in str(err)
        assert "NSGA2Config.default()" in str(err)
        assert err.details == {"field": "pop_size"}

    def test_objective_count_error(self):
        from paretoengine.exceptions import ObjectiveCountError

        err = ObjectiveCountError(expected=2, actual=3, source="Evaluator")
        assert "Evaluator reports 3 objectives" in str(err)
        assert err.details["expected"] == 2


class TestRuntimeErrors:
    def test_evaluation_error_keeps_genotype(self):
        from paretoengine.exceptions import EvaluationError

        err = EvaluationError("NaN objective", genotype=[0.1, 0.2])
        assert err.details["genotype"] == [0.1, 0.2]
        assert "finite value per objective" in str(err)

    def test_invariant_violation_details(self):
        from paretoengine.exceptions import InvariantViolationError

        err = InvariantViolationError("archive overflow", size=5, capacity=4)
        assert err.details == {"size": 5, "capacity": 4}
        assert err.suggestion is None


class TestExceptionHierarchy:
    def test_configuration_errors_share_a_base(self):
        from paretoengine.exceptions import (
            ConfigurationError,
            InvalidStrategyError,
            MissingConfigError,
            ObjectiveCountError,
            ParetoEngineError,
        )

        assert issubclass(ConfigurationError, ParetoEngineError)
        for cls in (InvalidStrategyError, MissingConfigError, ObjectiveCountError):
            assert issubclass(cls, ConfigurationError)

    def test_runtime_errors_share_a_base(self):
        from paretoengine.exceptions import EvaluationError, InvariantViolationError, OptimizationError

        assert issubclass(EvaluationError, OptimizationError)
        assert issubclass(InvariantViolationError, OptimizationError)

    def test_catching_base_class(self):
        from paretoengine.exceptions import InvalidStrategyError, ParetoEngineError

        with pytest.raises(ParetoEngineError):
            raise InvalidStrategyError("bogus")

    def test_exports_match_top_level(self):
        import paretoengine
        from paretoengine import exceptions

        for name in exceptions.__all__:
            assert getattr(paretoengine, name) is getattr(exceptions, name)
