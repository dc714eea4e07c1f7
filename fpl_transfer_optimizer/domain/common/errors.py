"""Structured error types raised at the engine boundary."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ErrorType(str, Enum):
    """Standard error types for consistent handling across callers."""

    VALIDATION_ERROR = "validation_error"
    CONFIGURATION_ERROR = "configuration_error"


class DomainError(BaseModel):
    """Structured error information for caller consumption."""

    error_type: ErrorType = Field(..., description="Standardized error type")
    message: str = Field(..., min_length=1, description="Human-readable error message")
    details: Optional[Dict] = Field(None, description="Additional error context")
    field_errors: Optional[Dict[str, str]] = Field(
        None, description="Field-specific validation errors"
    )

    @classmethod
    def validation_error(
        cls,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
        details: Optional[Dict] = None,
    ) -> "DomainError":
        """Create a validation error."""
        return cls(
            error_type=ErrorType.VALIDATION_ERROR,
            message=message,
            field_errors=field_errors,
            details=details,
        )

    @classmethod
    def configuration_error(
        cls,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
        details: Optional[Dict] = None,
    ) -> "DomainError":
        """Create a configuration error (the caller asked for an impossible run)."""
        return cls(
            error_type=ErrorType.CONFIGURATION_ERROR,
            message=message,
            field_errors=field_errors,
            details=details,
        )


class EngineInputError(ValueError):
    """
    Raised when the optimiser is called with inputs it cannot work with.

    Carries a ``DomainError`` so callers can branch on ``error.error_type``
    and read per-field messages without parsing the exception text.
    ``CONFIGURATION_ERROR`` marks a run that cannot start (empty horizon,
    squad of the wrong size); ``VALIDATION_ERROR`` marks malformed values.
    """

    def __init__(self, error: DomainError):
        super().__init__(error.message)
        self.error = error

    @classmethod
    def invalid(
        cls, message: str, field_errors: Optional[Dict[str, str]] = None
    ) -> "EngineInputError":
        return cls(DomainError.validation_error(message, field_errors=field_errors))

    @classmethod
    def misconfigured(
        cls,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
        details: Optional[Dict] = None,
    ) -> "EngineInputError":
        return cls(
            DomainError.configuration_error(
                message, field_errors=field_errors, details=details
            )
        )
