"""
Quality Validation Package

Contract and adapters for the external quality validator, plus the scorer
that turns raw metric scores into pass/fail results per quality tier.
"""

from .http_client import HttpQualityValidator
from .scorer import QualityScorer
from .types import (
    METRIC_NAMES,
    TIER_THRESHOLDS,
    MetricScores,
    QualityThresholds,
    ValidationResult,
    thresholds_for_tier,
)
from .validator import QualityValidator, SafeQualityValidator

__all__ = [
    # Types
    "METRIC_NAMES",
    "MetricScores",
    "QualityThresholds",
    "TIER_THRESHOLDS",
    "ValidationResult",
    "thresholds_for_tier",
    # Classes
    "HttpQualityValidator",
    "QualityScorer",
    "QualityValidator",
    "SafeQualityValidator",
]
