"""
Retry Orchestration Package

The retry episode state machine, its request and result types, and the
generator protocol it drives.
"""

from .orchestrator import EpisodeJob, RetryOrchestrator
from .recommendations import build_recommendations
from .types import (
    ArtifactGenerator,
    EpisodeResult,
    EpisodeState,
    FailureResult,
    GenerationOutput,
    GenerationRequest,
    PartialSuccessResult,
    SuccessResult,
    TerminationReason,
)

__all__ = [
    # Types
    "ArtifactGenerator",
    "EpisodeJob",
    "EpisodeResult",
    "EpisodeState",
    "FailureResult",
    "GenerationOutput",
    "GenerationRequest",
    "PartialSuccessResult",
    "SuccessResult",
    "TerminationReason",
    # Functions
    "build_recommendations",
    # Classes
    "RetryOrchestrator",
]
