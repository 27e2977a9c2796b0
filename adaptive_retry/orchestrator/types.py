"""
Orchestrator Types

Generation request, generator protocol, episode states and episode results.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..analysis.types import FailureAnalysis
from ..config import QualityTier
from ..errors import InvalidRequestError
from ..history import Attempt
from ..parameters import ParameterKey
from ..strategy.types import StrategyType
from ..validation.types import ValidationResult


@dataclass(frozen=True)
class GenerationRequest:
    """Immutable base parameters of one generation job."""

    reference_id: str
    """Identity the artifact must match (e.g. a model id)."""

    prompt: str
    """Generation prompt."""

    pose: str
    """Pose the subject is expected to take."""

    product_ref: str | None = None
    """Optional product reference the artifact must reproduce."""

    quality_tier: QualityTier = QualityTier.STANDARD
    """Requested quality tier."""

    consistency_weight: float = 0.5
    """Priority weight of subject consistency."""

    accuracy_weight: float = 0.5
    """Priority weight of product accuracy."""

    def __post_init__(self) -> None:
        for name in ("reference_id", "prompt", "pose"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise InvalidRequestError(
                    f"Missing required request field: {name}", field_name=name
                )
        for name in ("consistency_weight", "accuracy_weight"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidRequestError(
                    f"{name} must be a number, got {value!r}", field_name=name
                )
            if not 0.0 <= value <= 1.0:
                raise InvalidRequestError(
                    f"{name} must be within [0, 1], got {value}",
                    field_name=name,
                )
        tier = QualityTier.parse(self.quality_tier)
        if tier is None:
            raise InvalidRequestError(
                f"Unknown quality tier: {self.quality_tier!r}",
                field_name="quality_tier",
            )
        object.__setattr__(self, "quality_tier", tier)


@dataclass(frozen=True)
class GenerationOutput:
    """What the generation backend returns for one call."""

    artifact_ref: str
    """Reference to the generated artifact."""

    cost: float | None = None
    """Cost reported by the backend, if it reports one."""


class ArtifactGenerator(Protocol):
    """Protocol for the external generation backend."""

    async def generate(
        self,
        request: GenerationRequest,
        parameters: Mapping[ParameterKey, float],
    ) -> GenerationOutput:
        """Generate a candidate artifact; raise on failure."""
        ...


class EpisodeState(str, Enum):
    """States of the retry episode state machine."""

    INIT = "init"
    VALIDATING = "validating"
    ANALYZING = "analyzing"
    SELECTING = "selecting"
    ADJUSTING = "adjusting"
    GENERATING = "generating"
    PASSED = "passed"
    BUDGET_EXCEEDED = "budget_exceeded"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    DONE = "done"


class TerminationReason(str, Enum):
    """Why an episode ended."""

    PASSED = "passed"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    BUDGET_EXCEEDED = "budget_exceeded"
    CANCELLED = "cancelled"


@dataclass(frozen=True, kw_only=True)
class EpisodeResult:
    """Common fields of every episode outcome."""

    job_id: str | None
    """Job the episode belonged to."""

    total_cost: float
    """Sum of all attempt costs, prior history included."""

    attempts_used: int
    """Attempts made during this episode."""

    total_attempts: int
    """Attempts in the full history."""

    best_score: float
    """Best overall quality seen."""

    strategy: StrategyType | None
    """Last strategy applied."""

    reason: TerminationReason
    """Why the episode ended."""

    history: tuple[Attempt, ...] = ()
    """Full attempt history at the end of the episode."""

    states: tuple[EpisodeState, ...] = ()
    """State machine trail."""

    success: bool = False
    partial: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "job_id": self.job_id,
            "success": self.success,
            "partial": self.partial,
            "reason": self.reason.value,
            "total_cost": self.total_cost,
            "attempts_used": self.attempts_used,
            "total_attempts": self.total_attempts,
            "best_score": self.best_score,
            "strategy": self.strategy.value if self.strategy else None,
        }


@dataclass(frozen=True, kw_only=True)
class SuccessResult(EpisodeResult):
    """An attempt passed validation."""

    attempt: Attempt
    success: bool = True

    @property
    def validation(self) -> ValidationResult | None:
        """Validation of the passing attempt."""
        return self.attempt.validation

    def summary(self) -> str:
        """Get a human-readable summary."""
        return (
            f"[SUCCESS] Passed on attempt {self.attempts_used} "
            f"with {self.best_score:.1%}, cost ${self.total_cost:.2f}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {**super().to_dict(), "attempt": self.attempt.to_dict()}


@dataclass(frozen=True, kw_only=True)
class PartialSuccessResult(EpisodeResult):
    """No attempt passed, but the best one is good enough to return."""

    attempt: Attempt
    success: bool = True
    partial: bool = True

    @property
    def validation(self) -> ValidationResult | None:
        """Validation of the best attempt."""
        return self.attempt.validation

    def summary(self) -> str:
        """Get a human-readable summary."""
        return (
            f"[PARTIAL] Best attempt {self.attempt.index} scored {self.best_score:.1%} "
            f"after {self.attempts_used} attempts, cost ${self.total_cost:.2f}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {**super().to_dict(), "attempt": self.attempt.to_dict()}


@dataclass(frozen=True, kw_only=True)
class FailureResult(EpisodeResult):
    """The episode ended without an acceptable artifact."""

    error: str
    """Human-readable failure description."""

    failure_analysis: FailureAnalysis | None = None
    """Analysis snapshot at termination."""

    recommendations: tuple[str, ...] = field(default_factory=tuple)
    """Heuristic next steps for the caller."""

    def summary(self) -> str:
        """Get a human-readable summary."""
        return (
            f"[FAILURE:{self.reason.value}] {self.error}\n"
            f"Attempts: {self.total_attempts}, best score {self.best_score:.1%}, "
            f"cost ${self.total_cost:.2f}\n"
            f"Recommendations: {len(self.recommendations)}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            **super().to_dict(),
            "error": self.error,
            "failure_analysis": self.failure_analysis.to_dict() if self.failure_analysis else None,
            "recommendations": list(self.recommendations),
        }
