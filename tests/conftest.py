"""Shared pytest fixtures for adaptive retry tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

import pytest

from adaptive_retry.config import QualityTier
from adaptive_retry.history import Attempt
from adaptive_retry.orchestrator import GenerationOutput, GenerationRequest
from adaptive_retry.parameters import ParameterKey
from adaptive_retry.validation import MetricScores, ValidationResult

ValidationFactory = Callable[..., ValidationResult]


def _validation(
    overall: float = 0.55,
    passes: bool = False,
    face: float = 0.8,
    pose: float = 0.8,
    color: float = 0.8,
    style: float = 0.8,
    branding: float = 0.9,
    tier: str = "standard",
) -> ValidationResult:
    return ValidationResult(
        metrics=MetricScores(
            face_consistency=face,
            pose_accuracy=pose,
            color_accuracy=color,
            style_accuracy=style,
            branding_accuracy=branding,
        ),
        overall_quality=overall,
        passes=passes,
        quality_tier=tier,
    )


class ScriptedGenerator:
    """Generator returning scripted outcomes in order; exceptions are raised."""

    def __init__(self, outcomes: Sequence[str | GenerationOutput | Exception]) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[GenerationRequest, dict[ParameterKey, float]]] = []

    async def generate(
        self,
        request: GenerationRequest,
        parameters: Mapping[ParameterKey, float],
    ) -> GenerationOutput:
        self.calls.append((request, dict(parameters)))
        outcome = self.outcomes[len(self.calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, GenerationOutput):
            return outcome
        return GenerationOutput(artifact_ref=outcome)


class ScriptedValidator:
    """Validator returning a scripted result per artifact ref."""

    def __init__(self, results: Mapping[str, ValidationResult | Exception]) -> None:
        self.results = dict(results)
        self.calls: list[dict[str, object]] = []

    async def validate(
        self,
        artifact_ref: str,
        expected_identity: str,
        expected_pose: str,
        product_ref: str | None = None,
        quality_tier: QualityTier | str = QualityTier.STANDARD,
    ) -> ValidationResult:
        self.calls.append(
            {
                "artifact_ref": artifact_ref,
                "expected_identity": expected_identity,
                "expected_pose": expected_pose,
                "product_ref": product_ref,
                "quality_tier": quality_tier,
            }
        )
        result = self.results[artifact_ref]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def make_validation() -> ValidationFactory:
    """Factory for validation results; metrics default to comfortably passing values."""
    return _validation


@pytest.fixture
def make_attempt(make_validation: ValidationFactory) -> Callable[..., Attempt]:
    """Factory for recorded attempts."""

    def factory(
        index: int,
        score: float | None = 0.4,
        cost: float = 0.04,
        parameters: Mapping[ParameterKey, float] | None = None,
        **metrics: float,
    ) -> Attempt:
        validation = None if score is None else make_validation(overall=score, **metrics)
        return Attempt(
            index=index,
            parameters=parameters or {},
            validation=validation,
            cost=cost,
        )

    return factory


@pytest.fixture
def request_() -> GenerationRequest:
    """A well-formed generation request."""
    return GenerationRequest(
        reference_id="model-007",
        prompt="Model wearing the product, studio lighting",
        pose="front",
        product_ref="products/jacket-42.png",
    )


@pytest.fixture
def scripted_generator() -> type[ScriptedGenerator]:
    """The scripted generator class."""
    return ScriptedGenerator


@pytest.fixture
def scripted_validator() -> type[ScriptedValidator]:
    """The scripted validator class."""
    return ScriptedValidator
