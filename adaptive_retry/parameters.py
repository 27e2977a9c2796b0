"""
Tunable Generation Parameters

Declarative table of the generation parameters the retry engine may adjust,
keyed by a typed (concern, aspect, parameter) enum instead of dotted strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Concern(str, Enum):
    """Top-level quality concern a parameter addresses."""

    CONSISTENCY = "consistency"
    ACCURACY = "accuracy"


class Aspect(str, Enum):
    """Quality aspect within a concern."""

    FACE = "face"
    POSE = "pose"
    COLOR = "color"
    STYLE = "style"
    BRANDING = "branding"


class ParameterKey(str, Enum):
    """Typed key of a tunable parameter: ``<concern>.<aspect>.<parameter>``."""

    MODEL_REFERENCE_STRENGTH = "consistency.face.model_reference_strength"
    FACE_PRESERVATION_WEIGHT = "consistency.face.face_preservation_weight"
    POSE_GUIDANCE_SCALE = "consistency.pose.pose_guidance_scale"
    BODY_STRUCTURE_WEIGHT = "consistency.pose.body_structure_weight"
    COLOR_MATCHING_WEIGHT = "accuracy.color.color_matching_weight"
    COLOR_PRESERVATION_STRENGTH = "accuracy.color.color_preservation_strength"
    STYLE_TRANSFER_WEIGHT = "accuracy.style.style_transfer_weight"
    TEXTURE_PRESERVATION_STRENGTH = "accuracy.style.texture_preservation_strength"
    BRANDING_ENHANCEMENT_WEIGHT = "accuracy.branding.branding_enhancement_weight"
    LOGO_PRESERVATION_STRENGTH = "accuracy.branding.logo_preservation_strength"

    @property
    def concern(self) -> Concern:
        """Concern segment of the key."""
        return Concern(self.value.split(".")[0])

    @property
    def aspect(self) -> Aspect:
        """Aspect segment of the key."""
        return Aspect(self.value.split(".")[1])

    @property
    def parameter(self) -> str:
        """Bare parameter name, e.g. ``pose_guidance_scale``."""
        return self.value.split(".")[2]


@dataclass(frozen=True)
class ParameterSpec:
    """Bounds, step and default of one tunable parameter."""

    min: float
    max: float
    step: float
    default: float

    def clamp(self, value: float) -> float:
        """Clamp a value into [min, max]."""
        return max(self.min, min(self.max, value))


PARAMETER_TABLE: dict[ParameterKey, ParameterSpec] = {
    ParameterKey.MODEL_REFERENCE_STRENGTH: ParameterSpec(0.7, 1.0, 0.1, 0.8),
    ParameterKey.FACE_PRESERVATION_WEIGHT: ParameterSpec(0.8, 1.0, 0.05, 0.85),
    ParameterKey.POSE_GUIDANCE_SCALE: ParameterSpec(7.0, 15.0, 1.0, 10.0),
    ParameterKey.BODY_STRUCTURE_WEIGHT: ParameterSpec(0.6, 0.9, 0.1, 0.7),
    ParameterKey.COLOR_MATCHING_WEIGHT: ParameterSpec(0.7, 1.0, 0.1, 0.8),
    ParameterKey.COLOR_PRESERVATION_STRENGTH: ParameterSpec(0.8, 1.0, 0.05, 0.85),
    ParameterKey.STYLE_TRANSFER_WEIGHT: ParameterSpec(0.6, 0.9, 0.1, 0.7),
    ParameterKey.TEXTURE_PRESERVATION_STRENGTH: ParameterSpec(0.7, 1.0, 0.1, 0.8),
    ParameterKey.BRANDING_ENHANCEMENT_WEIGHT: ParameterSpec(0.8, 1.0, 0.05, 0.9),
    ParameterKey.LOGO_PRESERVATION_STRENGTH: ParameterSpec(0.9, 1.0, 0.02, 0.95),
}


__all__ = [
    "Aspect",
    "Concern",
    "PARAMETER_TABLE",
    "ParameterKey",
    "ParameterSpec",
]
