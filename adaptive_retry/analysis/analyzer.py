"""
Failure Analyzer

Classifies a failing validation, together with the attempt history, into
failure categories and a severity level.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Sequence

import numpy as np

from ..history import Attempt, validated_attempts
from ..validation.types import ValidationResult
from .types import FailureAnalysis, FailureCategory, MetricTrend, Severity

logger = logging.getLogger(__name__)

# Cut-offs for failures in the latest validation
PRIMARY_THRESHOLDS: dict[FailureCategory, float] = {
    FailureCategory.FACE_CONSISTENCY: 0.5,
    FailureCategory.POSE_ACCURACY: 0.5,
    FailureCategory.COLOR_ACCURACY: 0.6,
    FailureCategory.BRANDING_ACCURACY: 0.7,
}
SECONDARY_THRESHOLDS: dict[FailureCategory, float] = {
    FailureCategory.STYLE_ACCURACY: 0.6,
}

# Looser cut-offs used when counting recurring issues across history
CONSISTENT_ISSUE_THRESHOLDS: dict[FailureCategory, float] = {
    FailureCategory.FACE_CONSISTENCY: 0.7,
    FailureCategory.POSE_ACCURACY: 0.6,
    FailureCategory.COLOR_ACCURACY: 0.7,
    FailureCategory.BRANDING_ACCURACY: 0.8,
}
CONSISTENT_ISSUE_RATIO = 0.6

TREND_METRICS: tuple[str, ...] = (
    "overall_quality",
    "face_consistency",
    "pose_accuracy",
    "color_accuracy",
    "style_accuracy",
    "branding_accuracy",
)
TREND_CONFIDENCE_DELTA = 0.1


def _metric(validation: ValidationResult, category: FailureCategory) -> float:
    return validation.metrics.get(category.value)


class FailureAnalyzer:
    """
    Classify failing validations.

    Primary failures pick the remediation strategy; secondary failures only
    contribute parameter adjustments. Severity combines the overall score
    with the number of primary failures.

    Example:
        analyzer = FailureAnalyzer()
        analysis = analyzer.analyze(validation, history)
        if analysis.severity is Severity.SEVERE:
            ...
    """

    def analyze(
        self,
        validation: ValidationResult,
        history: Sequence[Attempt] = (),
    ) -> FailureAnalysis:
        """
        Analyze the latest validation against the attempt history.

        Args:
            validation: Most recent validation result
            history: All attempts so far, oldest first

        Returns:
            FailureAnalysis for this iteration
        """
        primary = tuple(
            category
            for category, threshold in PRIMARY_THRESHOLDS.items()
            if _metric(validation, category) < threshold
        )
        secondary = tuple(
            category
            for category, threshold in SECONDARY_THRESHOLDS.items()
            if _metric(validation, category) < threshold
        )

        consistent: frozenset[FailureCategory] = frozenset()
        trends: dict[str, MetricTrend] = {}
        if history:
            consistent = self.identify_consistent_issues(history)
            trends = self.analyze_improvement_trends(history)

        severity = self.classify_severity(validation.overall_quality, len(primary))

        logger.info(
            f"Failure analysis: {len(primary)} primary, {len(secondary)} secondary, "
            f"severity={severity.value}"
        )

        return FailureAnalysis(
            primary_failures=primary,
            secondary_failures=secondary,
            consistent_issues=consistent,
            severity=severity,
            improvement_trends=trends,
        )

    @staticmethod
    def classify_severity(overall_quality: float, primary_count: int) -> Severity:
        """
        Severity from overall quality and the number of primary failures.

        Args:
            overall_quality: Overall score of the latest validation
            primary_count: Number of primary failures

        Returns:
            SEVERE, MODERATE or MINOR
        """
        if overall_quality < 0.3 or primary_count >= 3:
            return Severity.SEVERE
        if overall_quality < 0.5 or primary_count >= 2:
            return Severity.MODERATE
        return Severity.MINOR

    def identify_consistent_issues(self, history: Sequence[Attempt]) -> frozenset[FailureCategory]:
        """
        Issues present in at least 60% of prior attempts.

        Only validated, failing attempts contribute; the required count is
        ``ceil(0.6 * len(history))`` over the full history.
        """
        if not history:
            return frozenset()

        required = math.ceil(CONSISTENT_ISSUE_RATIO * len(history))
        counts: Counter[FailureCategory] = Counter()

        for attempt in validated_attempts(history):
            if attempt.validation.passes:  # type: ignore[union-attr]
                continue
            for category, threshold in CONSISTENT_ISSUE_THRESHOLDS.items():
                if _metric(attempt.validation, category) < threshold:  # type: ignore[arg-type]
                    counts[category] += 1

        return frozenset(c for c, n in counts.items() if n >= max(required, 1))

    def analyze_improvement_trends(self, history: Sequence[Attempt]) -> dict[str, MetricTrend]:
        """
        Compare per-metric means of the first and second half of history.

        The first half holds ``ceil(n / 2)`` samples. Metrics with fewer than
        two validated samples are omitted.
        """
        validations = [a.validation for a in validated_attempts(history)]
        if len(validations) < 2:
            return {}

        trends: dict[str, MetricTrend] = {}
        for metric in TREND_METRICS:
            if metric == "overall_quality":
                samples = [v.overall_quality for v in validations]  # type: ignore[union-attr]
            else:
                samples = [v.metrics.get(metric) for v in validations]  # type: ignore[union-attr]
            values = np.array(samples, dtype=float)

            split = math.ceil(len(values) / 2)
            change = float(np.mean(values[split:]) - np.mean(values[:split]))
            trends[metric] = MetricTrend(
                improving=change > 0,
                change=change,
                confidence="high" if abs(change) > TREND_CONFIDENCE_DELTA else "low",
            )

        return trends
