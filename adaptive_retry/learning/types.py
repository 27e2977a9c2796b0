"""
Learning Types Module

Snapshot dataclasses for the learning store's statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PARAMETER_EFFECTIVENESS_CAPACITY = 50
"""Samples kept per strategy/parameter effectiveness buffer."""

COST_EFFICIENCY_CAPACITY = 20
"""Samples kept per strategy cost-efficiency buffer."""

MIN_SCORE_FOR_COST_EFFICIENCY = 0.1
"""Floor for the score divisor of cost per score."""


@dataclass(frozen=True)
class StrategySuccessStats:
    """Success rate of one strategy type."""

    total_attempts: int
    """Episodes that used the strategy."""

    successes: int
    """Episodes that ended in (partial) success."""

    success_rate: float
    """successes / total_attempts."""


@dataclass(frozen=True)
class ParameterEffectivenessStats:
    """Mean effectiveness of one strategy/parameter pair."""

    data_points: int
    average_effectiveness: float


@dataclass(frozen=True)
class CostEfficiencyStats:
    """Mean cost per unit of best score for one strategy."""

    data_points: int
    average_cost_per_score: float


@dataclass(frozen=True)
class LearningStatistics:
    """Point-in-time snapshot of the learning store."""

    strategy_success: dict[str, StrategySuccessStats] = field(default_factory=dict)
    parameter_effectiveness: dict[str, ParameterEffectivenessStats] = field(default_factory=dict)
    cost_efficiency: dict[str, CostEfficiencyStats] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Whether no episode has been recorded."""
        return not (self.strategy_success or self.parameter_effectiveness or self.cost_efficiency)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "strategy_success": {
                k: {
                    "success_rate": v.success_rate,
                    "total_attempts": v.total_attempts,
                    "successes": v.successes,
                }
                for k, v in self.strategy_success.items()
            },
            "parameter_effectiveness": {
                k: {
                    "average_effectiveness": v.average_effectiveness,
                    "data_points": v.data_points,
                }
                for k, v in self.parameter_effectiveness.items()
            },
            "cost_efficiency": {
                k: {
                    "average_cost_per_score": v.average_cost_per_score,
                    "data_points": v.data_points,
                }
                for k, v in self.cost_efficiency.items()
            },
        }
