"""
Parameter Adjuster

Computes bounded, stepped parameter changes from a failure classification
and the attempt history. Every value it returns lies within the declared
bounds of its parameter.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Literal

from ..analysis.types import FailureAnalysis, FailureCategory
from ..history import Attempt, last_used_value
from ..parameters import PARAMETER_TABLE, ParameterKey, ParameterSpec
from .types import StrategyType

logger = logging.getLogger(__name__)

Direction = Literal["increase", "decrease"]

FAILURE_PARAMETERS: dict[FailureCategory, tuple[ParameterKey, ...]] = {
    FailureCategory.FACE_CONSISTENCY: (
        ParameterKey.MODEL_REFERENCE_STRENGTH,
        ParameterKey.FACE_PRESERVATION_WEIGHT,
    ),
    FailureCategory.POSE_ACCURACY: (
        ParameterKey.POSE_GUIDANCE_SCALE,
        ParameterKey.BODY_STRUCTURE_WEIGHT,
    ),
    FailureCategory.COLOR_ACCURACY: (
        ParameterKey.COLOR_MATCHING_WEIGHT,
        ParameterKey.COLOR_PRESERVATION_STRENGTH,
    ),
    FailureCategory.STYLE_ACCURACY: (ParameterKey.STYLE_TRANSFER_WEIGHT,),
    FailureCategory.BRANDING_ACCURACY: (
        ParameterKey.BRANDING_ENHANCEMENT_WEIGHT,
        ParameterKey.LOGO_PRESERVATION_STRENGTH,
    ),
}

REGENERATION_FACTOR = 1.2
PROGRESSIVE_STEP = 0.1

# Rounding keeps repeated float stepping reproducible
_PRECISION = 6


class ParameterAdjuster:
    """
    Compute parameter adjustments for a retry.

    Each failing category moves its associated parameters one step up from
    the value last used in history (or the default). Complete regeneration
    scales every adjustment by 1.2, and repeated attempts of the same
    strategy within one loop scale by ``1 + 0.1 * (k - 1)``. Scaled values
    are clamped back into their parameter's bounds.
    """

    def __init__(self, table: Mapping[ParameterKey, ParameterSpec] | None = None) -> None:
        """
        Initialize the adjuster.

        Args:
            table: Parameter table; defaults to PARAMETER_TABLE
        """
        self.table = dict(table) if table is not None else dict(PARAMETER_TABLE)

    def current_value(self, key: ParameterKey, history: Sequence[Attempt]) -> float:
        """Value last used for a parameter, or its default."""
        value = last_used_value(history, key)
        return value if value is not None else self.table[key].default

    def compute_adjustment(
        self,
        key: ParameterKey,
        history: Sequence[Attempt],
        direction: Direction = "increase",
    ) -> float:
        """
        Move a parameter one step in a direction, clamped to its bounds.

        Args:
            key: Parameter to adjust
            history: Attempt history supplying the last used value
            direction: 'increase' or 'decrease'

        Returns:
            Adjusted value within [min, max]
        """
        spec = self.table[key]
        value = self.current_value(key, history)
        moved = value + spec.step if direction == "increase" else value - spec.step
        return round(spec.clamp(moved), _PRECISION)

    def generate_adjustments(
        self,
        analysis: FailureAnalysis,
        history: Sequence[Attempt],
        strategy_type: StrategyType,
    ) -> dict[ParameterKey, float]:
        """
        Adjustments for every failure in an analysis.

        Primary failures and the style secondary failure each raise their
        associated parameters one step.

        Args:
            analysis: Failure analysis of the latest validation
            history: Attempt history
            strategy_type: Strategy the adjustments are for

        Returns:
            Parameter key to adjusted value
        """
        categories = list(analysis.primary_failures)
        if FailureCategory.STYLE_ACCURACY in analysis.secondary_failures:
            categories.append(FailureCategory.STYLE_ACCURACY)

        adjustments: dict[ParameterKey, float] = {}
        for category in categories:
            for key in FAILURE_PARAMETERS.get(category, ()):
                adjustments[key] = self.compute_adjustment(key, history, "increase")

        if strategy_type is StrategyType.COMPLETE_REGENERATION:
            adjustments = self.amplify(adjustments, REGENERATION_FACTOR)

        logger.debug(f"Adjustments for {strategy_type.value}: {self._describe(adjustments)}")
        return adjustments

    def amplify(
        self,
        adjustments: Mapping[ParameterKey, float],
        factor: float,
    ) -> dict[ParameterKey, float]:
        """Scale adjustments by a factor, clamping each into its bounds."""
        return {
            key: round(self.table[key].clamp(value * factor), _PRECISION)
            for key, value in adjustments.items()
        }

    def progressive(
        self,
        adjustments: Mapping[ParameterKey, float],
        repeat: int,
    ) -> dict[ParameterKey, float]:
        """
        Amplify adjustments for the k-th consecutive attempt of a strategy.

        Args:
            adjustments: Base adjustments of the strategy
            repeat: 1-based count of consecutive attempts with this strategy

        Returns:
            Adjustments scaled by ``1 + 0.1 * (repeat - 1)``
        """
        if repeat <= 1:
            return dict(adjustments)
        return self.amplify(adjustments, 1 + PROGRESSIVE_STEP * (repeat - 1))

    @staticmethod
    def _describe(adjustments: Mapping[ParameterKey, float]) -> str:
        return ", ".join(f"{k.parameter}={v}" for k, v in adjustments.items()) or "none"
