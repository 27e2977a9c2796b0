"""
Retry Strategy Package

Strategy selection and bounded parameter adjustment for quality-gated
retries.
"""

from .adjuster import FAILURE_PARAMETERS, ParameterAdjuster
from .selector import StrategySelector
from .types import Priority, Strategy, StrategyType

__all__ = [
    "FAILURE_PARAMETERS",
    "ParameterAdjuster",
    "Priority",
    "Strategy",
    "StrategySelector",
    "StrategyType",
]
