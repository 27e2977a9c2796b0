"""Tests for strategy selection."""

from __future__ import annotations

import pytest

from adaptive_retry.analysis import FailureAnalysis, FailureAnalyzer, FailureCategory, Severity
from adaptive_retry.config import QualityTier
from adaptive_retry.parameters import ParameterKey
from adaptive_retry.strategy import Priority, StrategySelector, StrategyType


@pytest.fixture
def selector() -> StrategySelector:
    """Create a strategy selector."""
    return StrategySelector()


def _analysis(*primary: FailureCategory, severity: Severity = Severity.MINOR) -> FailureAnalysis:
    return FailureAnalysis(primary_failures=primary, severity=severity)


# ============================================
# Type Selection Tests
# ============================================


class TestStrategyType:
    """Tests for the strategy type rules."""

    def test_face_failure_selects_model_focused(self, selector, make_validation):
        """Test a weak face score selects a model-focused strategy."""
        validation = make_validation(overall=0.55, face=0.4, pose=0.8)
        analysis = FailureAnalyzer().analyze(validation, [])

        strategy = selector.select(analysis, [])

        assert strategy.type is StrategyType.MODEL_FOCUSED
        assert strategy.priority is Priority.CONSISTENCY
        assert strategy.max_attempts == 3
        assert strategy.quality_tier is QualityTier.STANDARD
        assert strategy.estimated_cost == pytest.approx(0.06)
        assert ParameterKey.MODEL_REFERENCE_STRENGTH in strategy.parameter_adjustments

    def test_pose_failure_model_focused(self, selector):
        """Test pose failures select a model-focused strategy."""
        strategy = selector.select(_analysis(FailureCategory.POSE_ACCURACY))
        assert strategy.type is StrategyType.MODEL_FOCUSED

    @pytest.mark.parametrize(
        "category", [FailureCategory.COLOR_ACCURACY, FailureCategory.BRANDING_ACCURACY]
    )
    def test_product_failures(self, selector, category):
        """Test color and branding failures select a product-focused strategy."""
        strategy = selector.select(_analysis(category))
        assert strategy.type is StrategyType.PRODUCT_FOCUSED
        assert strategy.priority is Priority.ACCURACY

    def test_consistency_beats_accuracy(self, selector):
        """Test face failures win over color failures."""
        strategy = selector.select(
            _analysis(FailureCategory.COLOR_ACCURACY, FailureCategory.FACE_CONSISTENCY)
        )
        assert strategy.type is StrategyType.MODEL_FOCUSED

    def test_balanced_default(self, selector):
        """Test no primary failures keeps the balanced default."""
        strategy = selector.select(_analysis())
        assert strategy.type is StrategyType.BALANCED
        assert strategy.priority is Priority.CONSISTENCY
        assert strategy.parameter_adjustments == {}

    def test_severe_overrides(self, selector):
        """Test severe failures switch to complete regeneration."""
        strategy = selector.select(
            _analysis(FailureCategory.COLOR_ACCURACY, severity=Severity.SEVERE)
        )

        assert strategy.type is StrategyType.COMPLETE_REGENERATION
        assert strategy.priority is Priority.ACCURACY
        assert strategy.max_attempts == 2
        assert strategy.quality_tier is QualityTier.PREMIUM
        assert strategy.estimated_cost == pytest.approx(0.12)


# ============================================
# Attempt Budget Tests
# ============================================


class TestAttemptBudget:
    """Tests for history-based budget shrinking."""

    def test_short_history_keeps_budget(self, selector, make_attempt):
        """Test two prior attempts leave the budget alone."""
        history = [make_attempt(1), make_attempt(2)]
        assert selector.select(_analysis(), history).max_attempts == 3

    def test_long_history_shrinks_budget(self, selector, make_attempt):
        """Test three prior attempts shrink the budget by one."""
        history = [make_attempt(i) for i in range(1, 4)]
        assert selector.select(_analysis(), history).max_attempts == 2

    def test_budget_never_below_one(self, selector, make_attempt):
        """Test a severe failure with long history keeps one attempt."""
        history = [make_attempt(i) for i in range(1, 6)]
        strategy = selector.select(_analysis(severity=Severity.SEVERE), history)
        assert strategy.max_attempts == 1

    @pytest.mark.parametrize(
        "analysis",
        [
            _analysis(),
            _analysis(FailureCategory.FACE_CONSISTENCY),
            _analysis(FailureCategory.BRANDING_ACCURACY, severity=Severity.MODERATE),
            _analysis(severity=Severity.SEVERE),
        ],
    )
    def test_budget_monotonic_in_history_length(self, selector, make_attempt, analysis):
        """Test longer histories never get a larger budget."""
        budgets = [
            selector.select(analysis, [make_attempt(i) for i in range(1, n + 1)]).max_attempts
            for n in range(7)
        ]
        assert budgets == sorted(budgets, reverse=True)
        assert min(budgets) >= 1
