"""Heuristic next-step recommendations for failed episodes."""

from __future__ import annotations

from ..analysis.types import FailureAnalysis, FailureCategory

PERSISTENT_ISSUE_RECOMMENDATIONS: dict[FailureCategory, str] = {
    FailureCategory.FACE_CONSISTENCY: (
        "Check reference/model quality: consider a different model or updated reference images"
    ),
    FailureCategory.POSE_ACCURACY: "Review the pose reference or choose a simpler pose",
    FailureCategory.COLOR_ACCURACY: "Verify product image quality and lighting conditions",
    FailureCategory.BRANDING_ACCURACY: (
        "Ensure branding elements (logo/text) are clearly visible in the product image"
    ),
}

EXHAUSTED_RECOMMENDATION = "Retry later or escalate for manual review"


def build_recommendations(analysis: FailureAnalysis | None, exhausted: bool) -> tuple[str, ...]:
    """
    Recommendations derived from persistent issues.

    Args:
        analysis: Analysis snapshot at termination
        exhausted: Whether the attempt limit was reached

    Returns:
        Recommendations in a stable order
    """
    recommendations: list[str] = []
    if analysis is not None:
        for category, text in PERSISTENT_ISSUE_RECOMMENDATIONS.items():
            if category in analysis.consistent_issues:
                recommendations.append(text)
    if exhausted:
        recommendations.append(EXHAUSTED_RECOMMENDATION)
    return tuple(recommendations)
