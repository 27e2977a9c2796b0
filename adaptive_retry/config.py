"""
Retry Configuration Module

Typed configuration for the retry engine plus the quality-tier cost table.
Updates are applied through explicit, named fields; unknown keys are rejected
instead of being merged into the configuration.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any

from .errors import ConfigurationError

PARTIAL_SUCCESS_THRESHOLD = 0.5
"""Best score an exhausted episode must exceed to be reported as a partial success."""

DEFAULT_ATTEMPT_COST = 0.04
"""Cost charged for attempts of unknown tier or whose generation failed."""


class QualityTier(str, Enum):
    """Named cost/quality preset for generation and validation."""

    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"
    ULTRA = "ultra"

    @classmethod
    def parse(cls, value: QualityTier | str) -> QualityTier | None:
        """Return the tier for a value, or None when it is not a known tier."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


TIER_COSTS: dict[QualityTier, float] = {
    QualityTier.BASIC: 0.02,
    QualityTier.STANDARD: 0.04,
    QualityTier.PREMIUM: 0.08,
    QualityTier.ULTRA: 0.16,
}


def cost_for_tier(tier: QualityTier | str | None) -> float:
    """
    Per-attempt cost for a quality tier.

    Args:
        tier: Tier enum member or its name

    Returns:
        Attempt cost in dollars; DEFAULT_ATTEMPT_COST for unknown tiers
    """
    if tier is None:
        return DEFAULT_ATTEMPT_COST
    parsed = QualityTier.parse(tier)
    if parsed is None:
        return DEFAULT_ATTEMPT_COST
    return TIER_COSTS[parsed]


# camelCase names accepted at the boundary for callers of the HTTP surface
_KEY_ALIASES = {
    "maxRetries": "max_retries",
    "costLimit": "cost_limit",
    "enableLearning": "enable_learning",
    "partialSuccessThreshold": "partial_success_threshold",
    "defaultAttemptCost": "default_attempt_cost",
}

_ENV_PREFIX = "ADAPTIVE_RETRY_"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for the retry orchestrator."""

    max_retries: int = 5
    """Maximum attempts recorded for one job, prior history included."""

    cost_limit: float = 1.0
    """Cost ceiling in dollars for one job."""

    enable_learning: bool = True
    """Whether completed episodes update the learning store."""

    partial_success_threshold: float = PARTIAL_SUCCESS_THRESHOLD
    """Best score an exhausted episode must exceed to count as partial success."""

    default_attempt_cost: float = DEFAULT_ATTEMPT_COST
    """Cost recorded for attempts whose generation failed."""

    def __post_init__(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ConfigurationError(f"max_retries must be an integer, got {self.max_retries!r}")
        if self.max_retries < 1:
            raise ConfigurationError(f"max_retries must be >= 1, got {self.max_retries}")
        for name in ("cost_limit", "partial_success_threshold", "default_attempt_cost"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
        if not isinstance(self.enable_learning, bool):
            raise ConfigurationError(
                f"enable_learning must be a boolean, got {self.enable_learning!r}"
            )
        if self.cost_limit < 0:
            raise ConfigurationError(f"cost_limit must be >= 0, got {self.cost_limit}")
        if not 0.0 <= self.partial_success_threshold <= 1.0:
            raise ConfigurationError(
                f"partial_success_threshold must be within [0, 1], "
                f"got {self.partial_success_threshold}"
            )
        if self.default_attempt_cost < 0:
            raise ConfigurationError(
                f"default_attempt_cost must be >= 0, got {self.default_attempt_cost}"
            )

    @classmethod
    def field_names(cls) -> list[str]:
        """Names of the accepted configuration fields."""
        return [f.name for f in fields(cls)]

    def updated(self, changes: Mapping[str, Any]) -> RetryConfig:
        """
        Return a copy with the given fields replaced.

        Args:
            changes: Field name (snake_case or camelCase) to new value

        Returns:
            New RetryConfig

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid
        """
        accepted = self.field_names()
        normalized: dict[str, Any] = {}
        unknown: list[str] = []

        for key, value in changes.items():
            name = _KEY_ALIASES.get(key, key)
            if name not in accepted:
                unknown.append(key)
                continue
            normalized[name] = value

        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}",
                unknown_keys=unknown,
                accepted_keys=accepted,
            )

        return replace(self, **normalized)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RetryConfig:
        """
        Build a configuration from ADAPTIVE_RETRY_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ConfigurationError: If a variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        parsers = {
            "max_retries": int,
            "cost_limit": float,
            "enable_learning": _parse_bool,
            "partial_success_threshold": float,
        }
        for name, parser in parsers.items():
            raw = env.get(f"{_ENV_PREFIX}{name.upper()}")
            if raw is None or raw == "":
                continue
            try:
                values[name] = parser(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {_ENV_PREFIX}{name.upper()}: {raw!r}",
                    details={"variable": f"{_ENV_PREFIX}{name.upper()}"},
                ) from e

        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {raw!r}")


__all__ = [
    "DEFAULT_ATTEMPT_COST",
    "PARTIAL_SUCCESS_THRESHOLD",
    "QualityTier",
    "RetryConfig",
    "TIER_COSTS",
    "cost_for_tier",
]
