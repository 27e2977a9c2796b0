"""
Strategy Types

Enums and the Strategy dataclass describing a remediation approach.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..config import QualityTier
from ..parameters import ParameterKey


class StrategyType(str, Enum):
    """Named remediation approach."""

    MODEL_FOCUSED = "model_focused"
    """Subject identity or pose is off; strengthen reference conditioning."""

    PRODUCT_FOCUSED = "product_focused"
    """Product color or branding is off; strengthen product fidelity."""

    BALANCED = "balanced"
    """No dominant failure; nudge whatever failed."""

    COMPLETE_REGENERATION = "complete_regeneration"
    """Severe failure; regenerate aggressively at a higher tier."""


class Priority(str, Enum):
    """Which quality group a strategy favors."""

    CONSISTENCY = "consistency"
    ACCURACY = "accuracy"


@dataclass(frozen=True)
class Strategy:
    """A remediation strategy with its parameter policy and budget."""

    type: StrategyType = StrategyType.BALANCED
    """Remediation approach."""

    priority: Priority = Priority.CONSISTENCY
    """Quality group favored."""

    parameter_adjustments: Mapping[ParameterKey, float] = field(default_factory=dict)
    """Parameter key to clamped target value."""

    max_attempts: int = 3
    """Attempts allowed for this strategy within one loop."""

    quality_tier: QualityTier = QualityTier.STANDARD
    """Tier used for generation and validation."""

    estimated_cost: float = 0.06
    """Estimated cost of one attempt, checked against the cost ceiling."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "priority": self.priority.value,
            "parameter_adjustments": {k.value: v for k, v in self.parameter_adjustments.items()},
            "max_attempts": self.max_attempts,
            "quality_tier": self.quality_tier.value,
            "estimated_cost": self.estimated_cost,
        }
