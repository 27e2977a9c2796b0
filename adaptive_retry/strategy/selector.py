"""
Strategy Selector

Chooses a remediation strategy from a failure analysis and the attempt
history, and asks the ParameterAdjuster for its parameter adjustments.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..analysis.types import FailureAnalysis, FailureCategory, Severity
from ..config import QualityTier
from ..history import Attempt
from .adjuster import ParameterAdjuster
from .types import Priority, Strategy, StrategyType

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_ESTIMATED_COST = 0.06
REGENERATION_MAX_ATTEMPTS = 2
REGENERATION_ESTIMATED_COST = 0.12
HISTORY_SHRINK_LENGTH = 3


class StrategySelector:
    """
    Select a remediation strategy.

    Rules, in order:
    1. Face or pose failures select MODEL_FOCUSED with consistency priority.
    2. Otherwise color or branding failures select PRODUCT_FOCUSED with
       accuracy priority.
    3. Severe failures override the type with COMPLETE_REGENERATION at the
       premium tier, 2 attempts and a 0.12 estimated cost.
    4. With 3 or more attempts in history the attempt budget shrinks by one,
       never below one.
    """

    def __init__(self, adjuster: ParameterAdjuster | None = None) -> None:
        """
        Initialize the selector.

        Args:
            adjuster: Parameter adjuster; a default one is created if omitted
        """
        self.adjuster = adjuster or ParameterAdjuster()

    def select(self, analysis: FailureAnalysis, history: Sequence[Attempt] = ()) -> Strategy:
        """
        Choose a strategy for the next retry.

        Args:
            analysis: Failure analysis of the latest validation
            history: Attempt history

        Returns:
            Strategy with its parameter adjustments
        """
        strategy_type = StrategyType.BALANCED
        priority = Priority.CONSISTENCY
        max_attempts = DEFAULT_MAX_ATTEMPTS
        quality_tier = QualityTier.STANDARD
        estimated_cost = DEFAULT_ESTIMATED_COST

        if analysis.has_primary(FailureCategory.FACE_CONSISTENCY, FailureCategory.POSE_ACCURACY):
            strategy_type = StrategyType.MODEL_FOCUSED
            priority = Priority.CONSISTENCY
        elif analysis.has_primary(
            FailureCategory.COLOR_ACCURACY, FailureCategory.BRANDING_ACCURACY
        ):
            strategy_type = StrategyType.PRODUCT_FOCUSED
            priority = Priority.ACCURACY

        if analysis.severity is Severity.SEVERE:
            strategy_type = StrategyType.COMPLETE_REGENERATION
            max_attempts = REGENERATION_MAX_ATTEMPTS
            quality_tier = QualityTier.PREMIUM
            estimated_cost = REGENERATION_ESTIMATED_COST

        if len(history) >= HISTORY_SHRINK_LENGTH:
            max_attempts = max(1, max_attempts - 1)

        adjustments = self.adjuster.generate_adjustments(analysis, history, strategy_type)

        logger.info(
            f"Retry strategy: {strategy_type.value} ({priority.value} priority), "
            f"max_attempts={max_attempts}, tier={quality_tier.value}"
        )

        return Strategy(
            type=strategy_type,
            priority=priority,
            parameter_adjustments=adjustments,
            max_attempts=max_attempts,
            quality_tier=quality_tier,
            estimated_cost=estimated_cost,
        )
