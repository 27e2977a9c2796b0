"""
Learning Ledger Package

Rolling per-strategy and per-parameter outcome statistics kept across
episodes for offline tuning.
"""

from .store import LearningStore
from .types import (
    COST_EFFICIENCY_CAPACITY,
    PARAMETER_EFFECTIVENESS_CAPACITY,
    CostEfficiencyStats,
    LearningStatistics,
    ParameterEffectivenessStats,
    StrategySuccessStats,
)

__all__ = [
    "COST_EFFICIENCY_CAPACITY",
    "CostEfficiencyStats",
    "LearningStatistics",
    "LearningStore",
    "PARAMETER_EFFECTIVENESS_CAPACITY",
    "ParameterEffectivenessStats",
    "StrategySuccessStats",
]
