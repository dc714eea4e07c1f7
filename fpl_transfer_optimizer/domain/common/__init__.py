"""Common domain types and utilities."""

from .errors import DomainError, EngineInputError, ErrorType

__all__ = [
    "DomainError",
    "EngineInputError",
    "ErrorType",
]
