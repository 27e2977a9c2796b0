"""Errors raised by external generation and validation collaborators."""

from __future__ import annotations

from typing import Any

from .base import RetryError


class ExternalGenerationError(RetryError):
    """
    Raised when the generation backend fails.

    Never escapes an episode: the orchestrator records a costed,
    unvalidated attempt and moves on to the next iteration.
    """

    def __init__(
        self,
        message: str,
        attempt_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if attempt_index is not None:
            details["attempt_index"] = attempt_index
        super().__init__(message, details)


class ExternalValidationError(RetryError):
    """Raised when the quality validator fails; mapped to a zero-score result."""

    pass


class ValidatorClientError(ExternalValidationError):
    """Raised when the HTTP validator service cannot be reached or answers badly."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
