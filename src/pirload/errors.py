"""
Exception hierarchy for the ingestion pipeline.

Structural failures and validation failures are raised as subclasses of
IngestionError. Per-row data-quality issues during loading are never
raised; they are substituted in place and logged.
"""

from pathlib import Path
from typing import Any


class IngestionError(Exception):
    """Base class for fatal ingestion failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize error.

        Args:
            message: Human-readable error message.
            details: Additional structured context for logging.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnrecognizedFormatError(IngestionError):
    """File extension does not map to a supported format."""

    def __init__(self, path: Path) -> None:
        msg = (
            f"Unrecognized file format for {path}. "
            "Supported formats: .csv, .parquet"
        )
        super().__init__(msg, {"path": str(path)})
        self.path = path


class SourceUnreadableError(IngestionError):
    """Source file could not be opened or read."""

    def __init__(self, path: Path, reason: str | None = None) -> None:
        msg = f"Unable to read source {path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, {"path": str(path), "reason": reason})
        self.path = path


class EmptySourceError(IngestionError):
    """Source contains no usable data rows."""

    def __init__(self, path: Path) -> None:
        msg = f"No data found in {path}"
        super().__init__(msg, {"path": str(path)})
        self.path = path


class SchemaViolationError(IngestionError):
    """Selected column is missing or has an unsupported type."""

    def __init__(self, column: str | None, reason: str) -> None:
        msg = f"Column {column!r}: {reason}" if column is not None else reason
        super().__init__(msg, {"column": column, "reason": reason})
        self.column = column
        self.reason = reason


class ColumnValidationError(IngestionError):
    """A value in the selected column does not fit the configured bit width."""

    def __init__(
        self,
        *,
        row: int,
        raw: str,
        bit_width: int,
        max_value: int,
        kind: str,
    ) -> None:
        msg = (
            f"Invalid value at row {row}: {raw!r} ({kind}). "
            f"Column must contain only values in [0, {max_value}] for d={bit_width}"
        )
        super().__init__(
            msg,
            {
                "row": row,
                "raw": raw,
                "bit_width": bit_width,
                "max_value": max_value,
                "kind": kind,
            },
        )
        self.row = row
        self.raw = raw
        self.bit_width = bit_width
        self.max_value = max_value
        self.kind = kind


class BufferAllocationError(IngestionError):
    """Entry buffer could not be allocated."""

    def __init__(self, length: int) -> None:
        msg = f"Memory allocation failed for an entry buffer of {length} entries"
        super().__init__(msg, {"length": length})
        self.length = length


class BufferReleasedError(IngestionError):
    """Entry buffer was accessed after ownership was handed off."""

    def __init__(self) -> None:
        super().__init__("Entry buffer has already been released to the engine")


class EntryVerificationError(IngestionError):
    """Populated buffer violates the entry schema."""
