"""
Validation Types Module

Dataclasses describing a quality validation of one candidate artifact.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config import QualityTier


@dataclass(frozen=True)
class MetricScores:
    """Per-metric quality scores, each in [0, 1]."""

    face_consistency: float = 0.0
    """Identity similarity to the reference subject."""

    pose_accuracy: float = 0.0
    """Agreement with the requested pose."""

    color_accuracy: float = 0.0
    """Color fidelity to the product reference."""

    style_accuracy: float = 0.0
    """Texture/pattern fidelity to the product reference."""

    branding_accuracy: float = 0.0
    """Visibility and fidelity of logos and text."""

    @property
    def consistency_score(self) -> float:
        """Mean of the subject-consistency metrics."""
        return (self.face_consistency + self.pose_accuracy) / 2

    @property
    def accuracy_score(self) -> float:
        """Mean of the product-accuracy metrics."""
        return (self.color_accuracy + self.style_accuracy + self.branding_accuracy) / 3

    def get(self, name: str) -> float:
        """Look up a metric by attribute name."""
        return float(getattr(self, name))

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "face_consistency": self.face_consistency,
            "pose_accuracy": self.pose_accuracy,
            "color_accuracy": self.color_accuracy,
            "style_accuracy": self.style_accuracy,
            "branding_accuracy": self.branding_accuracy,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MetricScores:
        """Build from a dictionary; missing metrics score 0."""
        return cls(
            face_consistency=float(data.get("face_consistency", 0.0)),
            pose_accuracy=float(data.get("pose_accuracy", 0.0)),
            color_accuracy=float(data.get("color_accuracy", 0.0)),
            style_accuracy=float(data.get("style_accuracy", 0.0)),
            branding_accuracy=float(data.get("branding_accuracy", 0.0)),
        )


METRIC_NAMES: tuple[str, ...] = (
    "face_consistency",
    "pose_accuracy",
    "color_accuracy",
    "style_accuracy",
    "branding_accuracy",
)


@dataclass(frozen=True)
class QualityThresholds:
    """Threshold snapshot a validation was judged against."""

    overall: float = 0.7
    face: float = 0.7
    pose: float = 0.6
    color: float = 0.7
    style: float = 0.6
    branding: float = 0.8

    consistency_weight: float = 0.5
    """Weight of the consistency group in the overall score."""

    accuracy_weight: float = 0.5
    """Weight of the accuracy group in the overall score."""

    @property
    def consistency_group(self) -> float:
        """Group threshold for consistency (mean of face and pose)."""
        return (self.face + self.pose) / 2

    @property
    def accuracy_group(self) -> float:
        """Group threshold for accuracy (mean of color, style and branding)."""
        return (self.color + self.style + self.branding) / 3

    def for_metric(self, name: str) -> float:
        """Threshold for a metric attribute name of MetricScores."""
        return {
            "face_consistency": self.face,
            "pose_accuracy": self.pose,
            "color_accuracy": self.color,
            "style_accuracy": self.style,
            "branding_accuracy": self.branding,
        }[name]

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "overall": self.overall,
            "face": self.face,
            "pose": self.pose,
            "color": self.color,
            "style": self.style,
            "branding": self.branding,
            "consistency_weight": self.consistency_weight,
            "accuracy_weight": self.accuracy_weight,
        }


TIER_THRESHOLDS: dict[QualityTier, QualityThresholds] = {
    QualityTier.BASIC: QualityThresholds(
        overall=0.55, face=0.55, pose=0.45, color=0.55, style=0.45, branding=0.65
    ),
    QualityTier.STANDARD: QualityThresholds(
        overall=0.65, face=0.65, pose=0.55, color=0.65, style=0.55, branding=0.75
    ),
    QualityTier.PREMIUM: QualityThresholds(
        overall=0.75, face=0.75, pose=0.65, color=0.75, style=0.65, branding=0.85
    ),
    QualityTier.ULTRA: QualityThresholds(
        overall=0.85, face=0.85, pose=0.75, color=0.85, style=0.75, branding=0.90
    ),
}


def thresholds_for_tier(tier: QualityTier | str) -> QualityThresholds:
    """Thresholds for a tier; unknown tiers fall back to standard."""
    parsed = QualityTier.parse(tier)
    return TIER_THRESHOLDS[parsed or QualityTier.STANDARD]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of scoring one candidate artifact."""

    metrics: MetricScores
    """Per-metric scores."""

    overall_quality: float
    """Weighted overall score in [0, 1]."""

    passes: bool
    """Whether the artifact met every required threshold."""

    thresholds: QualityThresholds = field(default_factory=QualityThresholds)
    """Thresholds used for the pass decision."""

    quality_tier: str = QualityTier.STANDARD.value
    """Tier the artifact was validated at."""

    feedback: tuple[str, ...] = ()
    """Human-readable feedback lines from the validator."""

    error: str | None = None
    """Set when the validator failed and this is a stand-in result."""

    @classmethod
    def failed(cls, quality_tier: QualityTier | str, error: str) -> ValidationResult:
        """Zero-score failing result standing in for a validator error."""
        tier = QualityTier.parse(quality_tier)
        tier_name = tier.value if tier else str(quality_tier)
        return cls(
            metrics=MetricScores(),
            overall_quality=0.0,
            passes=False,
            thresholds=thresholds_for_tier(quality_tier),
            quality_tier=tier_name,
            feedback=("Validation failed due to technical error",),
            error=error,
        )

    def summary(self) -> str:
        """Get a one-line human-readable summary."""
        status = "PASS" if self.passes else "FAIL"
        return f"[{status}] overall={self.overall_quality:.1%} tier={self.quality_tier}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "metrics": self.metrics.to_dict(),
            "overall_quality": self.overall_quality,
            "passes": self.passes,
            "thresholds": self.thresholds.to_dict(),
            "quality_tier": self.quality_tier,
            "feedback": list(self.feedback),
            "error": self.error,
        }
