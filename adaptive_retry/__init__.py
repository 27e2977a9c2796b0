"""Adaptive Retry - quality-gated generation retries.

This package provides the control loop that retries a generation job until
its artifact passes quality validation:
- Failure analysis and severity classification
- Strategy selection with bounded parameter adjustment
- Retry orchestration under attempt and cost budgets
- A shared ledger of strategy and parameter outcomes
"""

from __future__ import annotations

from .analysis import FailureAnalysis, FailureAnalyzer, FailureCategory, Severity
from .config import QualityTier, RetryConfig, cost_for_tier
from .history import Attempt
from .learning import LearningStatistics, LearningStore
from .orchestrator import (
    EpisodeResult,
    FailureResult,
    GenerationOutput,
    GenerationRequest,
    PartialSuccessResult,
    RetryOrchestrator,
    SuccessResult,
)
from .parameters import ParameterKey
from .strategy import ParameterAdjuster, Strategy, StrategySelector, StrategyType
from .validation import MetricScores, QualityScorer, ValidationResult

__version__ = "0.1.0"

__all__ = [
    "Attempt",
    "EpisodeResult",
    "FailureAnalysis",
    "FailureAnalyzer",
    "FailureCategory",
    "FailureResult",
    "GenerationOutput",
    "GenerationRequest",
    "LearningStatistics",
    "LearningStore",
    "MetricScores",
    "ParameterAdjuster",
    "ParameterKey",
    "PartialSuccessResult",
    "QualityScorer",
    "QualityTier",
    "RetryConfig",
    "RetryOrchestrator",
    "Severity",
    "Strategy",
    "StrategySelector",
    "StrategyType",
    "SuccessResult",
    "ValidationResult",
    "cost_for_tier",
]
