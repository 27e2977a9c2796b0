"""Tests for the learning store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import polars as pl
import pytest

from adaptive_retry.learning import LearningStore
from adaptive_retry.orchestrator import FailureResult, TerminationReason
from adaptive_retry.parameters import ParameterKey
from adaptive_retry.strategy import Strategy, StrategyType


@pytest.fixture
def store() -> LearningStore:
    """Create an empty learning store."""
    return LearningStore()


@pytest.fixture
def strategy() -> Strategy:
    """A model-focused strategy adjusting two parameters."""
    return Strategy(
        type=StrategyType.MODEL_FOCUSED,
        parameter_adjustments={
            ParameterKey.MODEL_REFERENCE_STRENGTH: 0.9,
            ParameterKey.FACE_PRESERVATION_WEIGHT: 0.9,
        },
    )


def _result(success: bool, best_score: float, total_cost: float) -> FailureResult:
    # Only the shared fields matter to the store
    return FailureResult(
        job_id="job",
        total_cost=total_cost,
        attempts_used=1,
        total_attempts=1,
        best_score=best_score,
        strategy=StrategyType.MODEL_FOCUSED,
        reason=TerminationReason.PASSED if success else TerminationReason.ATTEMPTS_EXHAUSTED,
        success=success,
        error="",
    )


# ============================================
# Episode Update Tests
# ============================================


class TestEpisodeUpdates:
    """Tests for recording episode outcomes."""

    def test_starts_empty(self, store):
        """Test a new store has no statistics."""
        assert store.get_statistics().is_empty

    def test_success_counters(self, store, strategy):
        """Test strategy success counters and rate."""
        store.update_on_episode_end(strategy, _result(True, 0.8, 0.08))
        store.update_on_episode_end(strategy, _result(False, 0.4, 0.12))

        stats = store.get_statistics().strategy_success["model_focused"]
        assert stats.total_attempts == 2
        assert stats.successes == 1
        assert stats.success_rate == pytest.approx(0.5)

    def test_parameter_effectiveness(self, store, strategy):
        """Test success counts as 1.0 and failure as the best score."""
        store.update_on_episode_end(strategy, _result(True, 0.7, 0.04))
        store.update_on_episode_end(strategy, _result(False, 0.4, 0.04))

        assert store.effectiveness_samples("model_focused_model_reference_strength") == [1.0, 0.4]
        stats = store.get_statistics().parameter_effectiveness
        assert set(stats) == {
            "model_focused_model_reference_strength",
            "model_focused_face_preservation_weight",
        }
        assert stats["model_focused_face_preservation_weight"].average_effectiveness == (
            pytest.approx(0.7)
        )

    def test_cost_per_score(self, store, strategy):
        """Test cost per score divides by the best score."""
        store.update_on_episode_end(strategy, _result(True, 0.8, 0.16))
        assert store.cost_samples("model_focused") == [pytest.approx(0.2)]

    def test_cost_per_score_floor(self, store, strategy):
        """Test the divisor never drops below 0.1."""
        store.update_on_episode_end(strategy, _result(False, 0.0, 0.08))
        assert store.cost_samples("model_focused") == [pytest.approx(0.8)]

    def test_strategy_without_adjustments(self, store):
        """Test a strategy without adjustments only updates success and cost."""
        store.update_on_episode_end(Strategy(), _result(False, 0.5, 0.06))
        stats = store.get_statistics()
        assert stats.parameter_effectiveness == {}
        assert stats.strategy_success["balanced"].total_attempts == 1
        assert stats.cost_efficiency["balanced"].data_points == 1


# ============================================
# Ring Buffer Tests
# ============================================


class TestRingBuffers:
    """Tests for bounded sample buffers."""

    def test_effectiveness_keeps_last_fifty(self, store):
        """Appending 60 samples keeps the 50 most recent in order."""
        for i in range(60):
            store.record_effectiveness("balanced_style_transfer_weight", float(i))

        samples = store.effectiveness_samples("balanced_style_transfer_weight")
        assert samples == [float(i) for i in range(10, 60)]

    def test_cost_buffer_keeps_last_twenty(self, store, strategy):
        """Test cost buffers hold 20 samples."""
        for i in range(25):
            store.update_on_episode_end(strategy, _result(True, 1.0, float(i)))

        samples = store.cost_samples("model_focused")
        assert len(samples) == 20
        assert samples[0] == pytest.approx(5.0)
        assert samples[-1] == pytest.approx(24.0)

    def test_custom_capacity(self):
        """Test capacities are configurable."""
        store = LearningStore(effectiveness_capacity=3)
        for i in range(5):
            store.record_effectiveness("k", float(i))
        assert store.effectiveness_samples("k") == [2.0, 3.0, 4.0]

    def test_unknown_key_is_empty(self, store):
        """Test reading an unknown buffer returns no samples."""
        assert store.effectiveness_samples("missing") == []
        assert store.cost_samples("missing") == []


# ============================================
# Concurrency Tests
# ============================================


class TestConcurrency:
    """Tests for concurrent updates."""

    def test_no_lost_updates(self, store, strategy):
        """Test parallel updates are all counted."""
        result = _result(True, 0.9, 0.04)

        def update(_: int) -> None:
            store.update_on_episode_end(strategy, result)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(update, range(200)))

        stats = store.get_statistics()
        assert stats.strategy_success["model_focused"].total_attempts == 200
        assert stats.strategy_success["model_focused"].successes == 200
        assert stats.parameter_effectiveness[
            "model_focused_model_reference_strength"
        ].data_points == 50


# ============================================
# Reset / Export Tests
# ============================================


class TestResetAndExport:
    """Tests for reset and DataFrame export."""

    def test_reset(self, store, strategy):
        """Test reset clears every table."""
        store.update_on_episode_end(strategy, _result(True, 0.8, 0.04))
        store.reset()
        assert store.get_statistics().is_empty

    def test_to_dict(self, store, strategy):
        """Test dictionary export shape."""
        store.update_on_episode_end(strategy, _result(True, 0.8, 0.04))
        data = store.get_statistics().to_dict()
        assert data["strategy_success"]["model_focused"] == {
            "success_rate": 1.0,
            "total_attempts": 1,
            "successes": 1,
        }
        assert data["cost_efficiency"]["model_focused"]["data_points"] == 1

    def test_to_frame(self, store, strategy):
        """Test DataFrame export has one row per table entry."""
        store.update_on_episode_end(strategy, _result(True, 0.8, 0.04))
        df = store.to_frame()

        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["table", "key", "count", "mean"]
        assert df.height == 4
        tables = df.get_column("table").to_list()
        assert tables.count("parameter_effectiveness") == 2

    def test_empty_frame(self, store):
        """Test an empty store exports an empty typed frame."""
        df = store.to_frame()
        assert df.height == 0
        assert df.schema["mean"] == pl.Float64
