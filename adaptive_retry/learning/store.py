"""
Learning Store

Process-wide accumulator of strategy and parameter outcome statistics.
Descriptive bookkeeping only: nothing here feeds back into strategy
selection.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict, deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import polars as pl

from .types import (
    COST_EFFICIENCY_CAPACITY,
    MIN_SCORE_FOR_COST_EFFICIENCY,
    PARAMETER_EFFECTIVENESS_CAPACITY,
    CostEfficiencyStats,
    LearningStatistics,
    ParameterEffectivenessStats,
    StrategySuccessStats,
)

if TYPE_CHECKING:
    from ..history import Attempt
    from ..orchestrator.types import EpisodeResult
    from ..strategy.types import Strategy

logger = logging.getLogger(__name__)


@dataclass
class _SuccessCounter:
    attempts: int = 0
    successes: int = 0


class LearningStore:
    """
    Thread-safe ledger of episode outcomes.

    Three tables are kept:
    - strategy success counters per strategy type
    - parameter effectiveness per ``{strategy}_{parameter}`` (last 50 samples)
    - cost per score per strategy type (last 20 samples)

    Ring buffers evict their oldest sample on overflow. Every mutation and
    snapshot happens under a single lock, so concurrent jobs never lose
    updates. Inject one instance into every orchestrator sharing the ledger.
    """

    def __init__(
        self,
        effectiveness_capacity: int = PARAMETER_EFFECTIVENESS_CAPACITY,
        cost_capacity: int = COST_EFFICIENCY_CAPACITY,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            effectiveness_capacity: Samples kept per parameter effectiveness buffer
            cost_capacity: Samples kept per cost efficiency buffer
        """
        self.effectiveness_capacity = effectiveness_capacity
        self.cost_capacity = cost_capacity
        self._lock = threading.Lock()
        self._strategy_success: dict[str, _SuccessCounter] = defaultdict(_SuccessCounter)
        self._parameter_effectiveness: dict[str, deque[float]] = {}
        self._cost_efficiency: dict[str, deque[float]] = {}

    def update_on_episode_end(
        self,
        strategy: Strategy,
        result: EpisodeResult,
        history: Sequence[Attempt] = (),
    ) -> None:
        """
        Record the outcome of a completed episode.

        Args:
            strategy: Strategy the episode ended with
            result: Episode result
            history: Full attempt history (unused beyond the result's totals)
        """
        strategy_key = strategy.type.value
        effectiveness = 1.0 if result.success else float(result.best_score or 0.0)
        cost_per_score = result.total_cost / max(
            result.best_score or 0.0, MIN_SCORE_FOR_COST_EFFICIENCY
        )

        with self._lock:
            counter = self._strategy_success[strategy_key]
            counter.attempts += 1
            if result.success:
                counter.successes += 1

            for key in strategy.parameter_adjustments:
                self._append(
                    self._parameter_effectiveness,
                    f"{strategy_key}_{key.parameter}",
                    effectiveness,
                    self.effectiveness_capacity,
                )

            self._append(self._cost_efficiency, strategy_key, cost_per_score, self.cost_capacity)

        logger.debug(
            f"Learning updated for {strategy_key}: success={result.success}, "
            f"effectiveness={effectiveness:.3f}, cost_per_score={cost_per_score:.4f}, "
            f"history={len(history)}"
        )

    def record_effectiveness(self, key: str, value: float) -> None:
        """Append one sample to a parameter effectiveness buffer."""
        with self._lock:
            self._append(
                self._parameter_effectiveness, key, value, self.effectiveness_capacity
            )

    def effectiveness_samples(self, key: str) -> list[float]:
        """Current samples of a parameter effectiveness buffer, oldest first."""
        with self._lock:
            return list(self._parameter_effectiveness.get(key, ()))

    def cost_samples(self, strategy_key: str) -> list[float]:
        """Current samples of a cost efficiency buffer, oldest first."""
        with self._lock:
            return list(self._cost_efficiency.get(strategy_key, ()))

    def get_statistics(self) -> LearningStatistics:
        """Snapshot of counts and arithmetic means per key."""
        with self._lock:
            strategy_success = {
                key: StrategySuccessStats(
                    total_attempts=c.attempts,
                    successes=c.successes,
                    success_rate=c.successes / c.attempts if c.attempts else 0.0,
                )
                for key, c in self._strategy_success.items()
            }
            parameter_effectiveness = {
                key: ParameterEffectivenessStats(
                    data_points=len(values),
                    average_effectiveness=float(np.mean(values)),
                )
                for key, values in self._parameter_effectiveness.items()
                if values
            }
            cost_efficiency = {
                key: CostEfficiencyStats(
                    data_points=len(values),
                    average_cost_per_score=float(np.mean(values)),
                )
                for key, values in self._cost_efficiency.items()
                if values
            }

        return LearningStatistics(
            strategy_success=strategy_success,
            parameter_effectiveness=parameter_effectiveness,
            cost_efficiency=cost_efficiency,
        )

    def reset(self) -> None:
        """Clear all three tables."""
        with self._lock:
            self._strategy_success.clear()
            self._parameter_effectiveness.clear()
            self._cost_efficiency.clear()
        logger.info("Learning data reset")

    def to_frame(self) -> pl.DataFrame:
        """
        Statistics as a DataFrame.

        Returns:
            One row per table entry with columns table, key, count, mean
        """
        stats = self.get_statistics()
        rows: list[dict[str, object]] = []

        for key, s in stats.strategy_success.items():
            rows.append(
                {
                    "table": "strategy_success",
                    "key": key,
                    "count": s.total_attempts,
                    "mean": s.success_rate,
                }
            )
        for key, p in stats.parameter_effectiveness.items():
            rows.append(
                {
                    "table": "parameter_effectiveness",
                    "key": key,
                    "count": p.data_points,
                    "mean": p.average_effectiveness,
                }
            )
        for key, e in stats.cost_efficiency.items():
            rows.append(
                {
                    "table": "cost_efficiency",
                    "key": key,
                    "count": e.data_points,
                    "mean": e.average_cost_per_score,
                }
            )

        return pl.DataFrame(
            rows,
            schema={"table": pl.Utf8, "key": pl.Utf8, "count": pl.Int64, "mean": pl.Float64},
        )

    @staticmethod
    def _append(table: dict[str, deque[float]], key: str, value: float, capacity: int) -> None:
        buffer = table.get(key)
        if buffer is None:
            buffer = deque(maxlen=capacity)
            table[key] = buffer
        buffer.append(value)
