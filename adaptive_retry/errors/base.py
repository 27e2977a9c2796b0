"""Base exception classes for the adaptive retry engine."""

from __future__ import annotations

from typing import Any


class RetryError(Exception):
    """Base exception for all adaptive retry errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize retry error.

        Args:
            message: Human-readable error message.
            details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RetryError):
    """Raised when configuration keys or values are invalid."""

    def __init__(
        self,
        message: str,
        unknown_keys: list[str] | None = None,
        accepted_keys: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if unknown_keys:
            details["unknown_keys"] = sorted(unknown_keys)
        if accepted_keys:
            details["accepted_keys"] = sorted(accepted_keys)
        super().__init__(message, details)


class InvalidRequestError(RetryError):
    """Raised when a generation request violates its contract."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field_name:
            details["field"] = field_name
        super().__init__(message, details)
