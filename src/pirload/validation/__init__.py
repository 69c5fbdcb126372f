"""Column validation module."""

from pirload.validation.core import (
    ColumnValidator,
    ValidationResult,
    ViolationKind,
    validate_column,
)
from pirload.validation.reporter import ConsoleReporter

__all__ = [
    "ColumnValidator",
    "ConsoleReporter",
    "ValidationResult",
    "ViolationKind",
    "validate_column",
]
