"""
Attempt History

The Attempt record and the helpers that read an episode's attempt history.
Attempts are appended by a single job's loop and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from .config import DEFAULT_ATTEMPT_COST
from .parameters import ParameterKey
from .validation.types import ValidationResult


@dataclass(frozen=True)
class Attempt:
    """One generate + validate cycle within a retry episode."""

    index: int
    """1-based ordinal within the job's history."""

    parameters: Mapping[ParameterKey, float]
    """Adjusted parameter values used for generation."""

    validation: ValidationResult | None
    """Validation outcome; None when generation failed."""

    cost: float = DEFAULT_ATTEMPT_COST
    """Cost charged for the attempt."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    """When the attempt completed."""

    strategy_type: str | None = None
    """Strategy that produced the parameters."""

    artifact_ref: str | None = None
    """Reference to the generated artifact, if any."""

    error: str | None = None
    """Generation error message for unvalidated attempts."""

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"Attempt index must be >= 1, got {self.index}")
        if self.cost < 0:
            raise ValueError(f"Attempt cost must be non-negative, got {self.cost}")
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def score(self) -> float | None:
        """Overall quality, or None when the attempt was never validated."""
        return self.validation.overall_quality if self.validation is not None else None

    @property
    def passed(self) -> bool:
        """Whether the attempt's artifact passed validation."""
        return self.validation is not None and self.validation.passes

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "index": self.index,
            "parameters": {k.value: v for k, v in self.parameters.items()},
            "validation": self.validation.to_dict() if self.validation else None,
            "cost": self.cost,
            "timestamp": self.timestamp.isoformat(),
            "strategy_type": self.strategy_type,
            "artifact_ref": self.artifact_ref,
            "error": self.error,
        }


def total_cost(history: Sequence[Attempt]) -> float:
    """Sum of attempt costs."""
    return sum(attempt.cost for attempt in history)


def validated_attempts(history: Sequence[Attempt]) -> list[Attempt]:
    """Attempts that produced a validation result, in order."""
    return [attempt for attempt in history if attempt.validation is not None]


def best_attempt(history: Sequence[Attempt]) -> Attempt | None:
    """
    Highest-scoring validated attempt.

    Ties favor the earliest attempt.
    """
    best: Attempt | None = None
    for attempt in validated_attempts(history):
        if best is None or attempt.score > best.score:  # type: ignore[operator]
            best = attempt
    return best


def best_score(history: Sequence[Attempt]) -> float:
    """Overall quality of the best attempt, 0.0 when none was validated."""
    best = best_attempt(history)
    return best.score if best is not None and best.score is not None else 0.0


def last_used_value(history: Sequence[Attempt], key: ParameterKey) -> float | None:
    """Most recent value used for a parameter, or None if it was never set."""
    for attempt in reversed(history):
        if key in attempt.parameters:
            return attempt.parameters[key]
    return None


def next_index(history: Sequence[Attempt]) -> int:
    """Ordinal for the next appended attempt."""
    return history[-1].index + 1 if history else 1


__all__ = [
    "Attempt",
    "best_attempt",
    "best_score",
    "last_used_value",
    "next_index",
    "total_cost",
    "validated_attempts",
]
