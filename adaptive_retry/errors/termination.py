"""Errors that end a retry episode before another attempt is started."""

from __future__ import annotations

from typing import Any

from .base import RetryError


class EpisodeTerminationError(RetryError):
    """Base exception for budget and attempt-limit terminations."""

    pass


class BudgetExceededError(EpisodeTerminationError):
    """
    Raised when the next attempt's estimated cost would breach the cost limit.

    An episode ending this way is always reported as a failure, never as a
    partial success.
    """

    def __init__(
        self,
        message: str,
        current_cost: float | None = None,
        estimated_cost: float | None = None,
        cost_limit: float | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if current_cost is not None:
            details["current_cost"] = current_cost
        if estimated_cost is not None:
            details["estimated_cost"] = estimated_cost
        if cost_limit is not None:
            details["cost_limit"] = cost_limit
        super().__init__(message, details)


class AttemptsExhaustedError(EpisodeTerminationError):
    """Raised when the global retry limit has been reached."""

    def __init__(
        self,
        message: str,
        attempts_used: int | None = None,
        max_attempts: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if attempts_used is not None:
            details["attempts_used"] = attempts_used
        if max_attempts is not None:
            details["max_attempts"] = max_attempts
        super().__init__(message, details)
