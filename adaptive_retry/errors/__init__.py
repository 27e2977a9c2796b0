"""
Adaptive Retry Error Definitions

Provides the error hierarchy for the retry engine, separating contract
violations (which propagate to the caller) from collaborator failures and
episode terminations (which are absorbed into episode results).

Example:
    from adaptive_retry.errors import BudgetExceededError, InvalidRequestError

    try:
        result = await orchestrator.run_retry_episode(request, validation)
    except InvalidRequestError as e:
        logger.error(f"Rejected request: {e}")
"""

from .base import ConfigurationError, InvalidRequestError, RetryError
from .external import (
    ExternalGenerationError,
    ExternalValidationError,
    ValidatorClientError,
)
from .termination import (
    AttemptsExhaustedError,
    BudgetExceededError,
    EpisodeTerminationError,
)

__all__ = [
    "AttemptsExhaustedError",
    "BudgetExceededError",
    "ConfigurationError",
    "EpisodeTerminationError",
    "ExternalGenerationError",
    "ExternalValidationError",
    "InvalidRequestError",
    "RetryError",
    "ValidatorClientError",
]
