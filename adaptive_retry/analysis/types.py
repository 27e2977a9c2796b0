"""
Failure Analysis Types

Enums and dataclasses describing why a validation failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal


class FailureCategory(str, Enum):
    """Quality dimension a failure is attributed to."""

    FACE_CONSISTENCY = "face_consistency"
    POSE_ACCURACY = "pose_accuracy"
    COLOR_ACCURACY = "color_accuracy"
    STYLE_ACCURACY = "style_accuracy"
    BRANDING_ACCURACY = "branding_accuracy"


class Severity(str, Enum):
    """Coarse classification of a validation failure."""

    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


@dataclass(frozen=True)
class MetricTrend:
    """Direction of one metric between the first and second half of history."""

    improving: bool
    """Whether the second-half mean exceeds the first-half mean."""

    change: float
    """Second-half mean minus first-half mean."""

    confidence: Literal["high", "low"]
    """'high' when the absolute change exceeds 0.1."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "improving": self.improving,
            "change": self.change,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class FailureAnalysis:
    """Classification of a failing validation against its history."""

    primary_failures: tuple[FailureCategory, ...] = ()
    """Failures that drive strategy selection."""

    secondary_failures: tuple[FailureCategory, ...] = ()
    """Failures that only add parameter adjustments."""

    consistent_issues: frozenset[FailureCategory] = field(default_factory=frozenset)
    """Issues recurring across most prior attempts."""

    severity: Severity = Severity.MODERATE
    """Overall severity of the failure."""

    improvement_trends: dict[str, MetricTrend] = field(default_factory=dict)
    """Per-metric trends; diagnostic only."""

    @property
    def primary_count(self) -> int:
        """Number of primary failures."""
        return len(self.primary_failures)

    def has_primary(self, *categories: FailureCategory) -> bool:
        """Whether any of the categories is a primary failure."""
        return any(c in self.primary_failures for c in categories)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "primary_failures": [c.value for c in self.primary_failures],
            "secondary_failures": [c.value for c in self.secondary_failures],
            "consistent_issues": sorted(c.value for c in self.consistent_issues),
            "severity": self.severity.value,
            "improvement_trends": {k: v.to_dict() for k, v in self.improvement_trends.items()},
        }
