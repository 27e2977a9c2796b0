"""
Failure Analysis Package

Classifies failing validations into categories and severity, and tracks
recurring issues and score trends across an episode's history.
"""

from .analyzer import FailureAnalyzer
from .types import FailureAnalysis, FailureCategory, MetricTrend, Severity

__all__ = [
    "FailureAnalysis",
    "FailureAnalyzer",
    "FailureCategory",
    "MetricTrend",
    "Severity",
]
