"""
Quality Scorer

Turns raw per-metric scores into a ValidationResult: weighted overall
quality, tier thresholds, pass decision and feedback text.
"""

from __future__ import annotations

import logging

from ..config import QualityTier
from .types import (
    METRIC_NAMES,
    MetricScores,
    QualityThresholds,
    ValidationResult,
    thresholds_for_tier,
)

logger = logging.getLogger(__name__)

_ACTIONABLE_HINTS: dict[str, str] = {
    "face_consistency": "Strengthen model reference conditioning to improve facial consistency",
    "pose_accuracy": "Adjust pose-specific prompts or reference images for better body positioning",
    "color_accuracy": (
        "Enhance color matching by improving product color analysis or generation parameters"
    ),
    "style_accuracy": "Improve style transfer by refining texture and pattern preservation",
    "branding_accuracy": "Enhance logo and text visibility through branding enhancement prompts",
}


class QualityScorer:
    """
    Score candidate artifacts against tier thresholds.

    In standard mode an artifact passes when each metric group (consistency,
    accuracy) meets its group threshold and overall quality meets the overall
    threshold. Strict mode additionally requires every individual metric to
    meet its own threshold.

    Example:
        scorer = QualityScorer()
        result = scorer.score(MetricScores(0.8, 0.7, 0.75, 0.6, 0.9), "premium")
        if not result.passes:
            print(result.feedback)
    """

    def __init__(
        self,
        strict_mode: bool = False,
        consistency_weight: float = 0.5,
        accuracy_weight: float = 0.5,
    ) -> None:
        """
        Initialize the scorer.

        Args:
            strict_mode: Require every metric threshold to pass
            consistency_weight: Weight of the consistency group in overall quality
            accuracy_weight: Weight of the accuracy group in overall quality
        """
        self.strict_mode = strict_mode
        self.consistency_weight = consistency_weight
        self.accuracy_weight = accuracy_weight

    def thresholds(self, tier: QualityTier | str) -> QualityThresholds:
        """Tier thresholds carrying this scorer's group weights."""
        base = thresholds_for_tier(tier)
        return QualityThresholds(
            overall=base.overall,
            face=base.face,
            pose=base.pose,
            color=base.color,
            style=base.style,
            branding=base.branding,
            consistency_weight=self.consistency_weight,
            accuracy_weight=self.accuracy_weight,
        )

    def overall_quality(self, metrics: MetricScores) -> float:
        """Weighted overall quality clamped to [0, 1]."""
        score = (
            metrics.consistency_score * self.consistency_weight
            + metrics.accuracy_score * self.accuracy_weight
        )
        return max(0.0, min(1.0, score))

    def failing_metrics(self, metrics: MetricScores, thresholds: QualityThresholds) -> list[str]:
        """Names of metrics below their threshold, in declaration order."""
        return [
            name for name in METRIC_NAMES if metrics.get(name) < thresholds.for_metric(name)
        ]

    def passes(
        self,
        metrics: MetricScores,
        overall: float,
        thresholds: QualityThresholds,
    ) -> bool:
        """Apply the pass rule for the configured mode."""
        if overall < thresholds.overall:
            return False
        if self.strict_mode:
            return not self.failing_metrics(metrics, thresholds)
        return (
            metrics.consistency_score >= thresholds.consistency_group
            and metrics.accuracy_score >= thresholds.accuracy_group
        )

    def score(
        self,
        metrics: MetricScores,
        tier: QualityTier | str = QualityTier.STANDARD,
    ) -> ValidationResult:
        """
        Build a ValidationResult from raw metric scores.

        Args:
            metrics: Per-metric scores
            tier: Quality tier selecting the thresholds

        Returns:
            ValidationResult with overall quality, pass decision and feedback
        """
        thresholds = self.thresholds(tier)
        overall = self.overall_quality(metrics)
        passed = self.passes(metrics, overall, thresholds)

        feedback = [self.summarize(overall, passed)]
        feedback.extend(self.actionable_feedback(metrics, thresholds))

        parsed = QualityTier.parse(tier)
        result = ValidationResult(
            metrics=metrics,
            overall_quality=overall,
            passes=passed,
            thresholds=thresholds,
            quality_tier=parsed.value if parsed else QualityTier.STANDARD.value,
            feedback=tuple(feedback),
        )
        logger.debug(f"Scored artifact: {result.summary()}")
        return result

    @staticmethod
    def summarize(overall: float, passed: bool) -> str:
        """Four-band summary line for an overall score."""
        pct = f"{overall * 100:.1f}%"
        if passed:
            return f"Validation passed with {pct} overall quality."
        if overall >= 0.6:
            return f"Validation failed with {pct} overall quality; close to acceptable."
        if overall >= 0.4:
            return f"Validation failed with {pct} overall quality; significant improvements needed."
        return f"Validation failed with {pct} overall quality; major regeneration required."

    def actionable_feedback(
        self,
        metrics: MetricScores,
        thresholds: QualityThresholds,
    ) -> list[str]:
        """Improvement hints for every metric below its threshold."""
        return [_ACTIONABLE_HINTS[name] for name in self.failing_metrics(metrics, thresholds)]
