"""
Quality Validator Contract

The retry engine consumes the quality validator as a black box. This module
defines its protocol and the adapter that turns validator failures into
zero-score failing results.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..config import QualityTier
from .types import ValidationResult

logger = logging.getLogger(__name__)


class QualityValidator(Protocol):
    """Protocol for scoring one candidate artifact."""

    async def validate(
        self,
        artifact_ref: str,
        expected_identity: str,
        expected_pose: str,
        product_ref: str | None = None,
        quality_tier: QualityTier | str = QualityTier.STANDARD,
    ) -> ValidationResult:
        """Score an artifact against the expected identity, pose and product."""
        ...


class SafeQualityValidator:
    """
    Wrap a QualityValidator so that it never raises.

    Any exception from the wrapped validator is logged and replaced by
    ValidationResult.failed(), which scores zero and does not pass.
    """

    def __init__(self, validator: QualityValidator) -> None:
        """
        Initialize the adapter.

        Args:
            validator: Validator to delegate to
        """
        self.validator = validator

    async def validate(
        self,
        artifact_ref: str,
        expected_identity: str,
        expected_pose: str,
        product_ref: str | None = None,
        quality_tier: QualityTier | str = QualityTier.STANDARD,
    ) -> ValidationResult:
        """Delegate to the wrapped validator, absorbing its errors."""
        try:
            return await self.validator.validate(
                artifact_ref,
                expected_identity,
                expected_pose,
                product_ref=product_ref,
                quality_tier=quality_tier,
            )
        except Exception as e:
            logger.warning(f"Validation of {artifact_ref} failed: {e}")
            return ValidationResult.failed(quality_tier, str(e))
