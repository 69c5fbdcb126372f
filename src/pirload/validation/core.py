"""
Core validation logic for the target column.

Checks that every present value fits the configured bit width and
reports the first violation. This pass is read-only.
"""

from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np

from pirload.config.settings import IngestionSettings, OverflowPolicy
from pirload.errors import (
    ColumnValidationError,
    SchemaViolationError,
    SourceUnreadableError,
)
from pirload.ingestion.base import CellStatus, ColumnSource
from pirload.ingestion.sources import open_source
from pirload.utils.logging import get_logger
from pirload.validation.rules import overflow_mask, rejected_mask

log = get_logger(__name__)


class ViolationKind(str, Enum):
    """Why a column failed validation."""

    MALFORMED = "non-numeric value"
    NEGATIVE = "negative value"
    OUT_OF_RANGE = "value too large"
    SCHEMA = "schema violation"
    UNREADABLE = "unreadable source"


_STATUS_KINDS: dict[int, ViolationKind] = {
    CellStatus.MALFORMED: ViolationKind.MALFORMED,
    CellStatus.NEGATIVE: ViolationKind.NEGATIVE,
    CellStatus.VALUE: ViolationKind.OUT_OF_RANGE,
    CellStatus.OVERSIZED: ViolationKind.OUT_OF_RANGE,
}


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one column.

    Callers act only on `valid`; the remaining fields describe the first
    violation for diagnostics.
    """

    valid: bool
    source: Path
    column: str
    bit_width: int
    max_value: int
    rows_checked: int
    row: int | None = None
    raw: str | None = None
    kind: ViolationKind | None = None
    message: str | None = None

    def __bool__(self) -> bool:
        return self.valid

    def raise_for_violation(self) -> None:
        """
        Raise the IngestionError matching this result, if invalid.

        Raises:
            SchemaViolationError: Column missing or wrongly typed.
            SourceUnreadableError: Source could not be read.
            ColumnValidationError: A value is malformed, negative or too large.
        """
        if self.valid:
            return
        if self.kind is ViolationKind.SCHEMA:
            raise SchemaViolationError(self.column, self.message or "schema violation")
        if self.kind is ViolationKind.UNREADABLE:
            raise SourceUnreadableError(self.source, self.message)
        raise ColumnValidationError(
            row=self.row or 0,
            raw=self.raw or "",
            bit_width=self.bit_width,
            max_value=self.max_value,
            kind=(self.kind or ViolationKind.MALFORMED).value,
        )


class ColumnValidator:
    """
    Validates the target column of a source against a bit width.

    Empty cells are valid (they load as zero). The scan stops at the
    first violation.
    """

    def __init__(self, settings: IngestionSettings) -> None:
        """
        Initialize validator.

        Args:
            settings: Ingestion settings carrying bit width and overflow policy.
        """
        self.settings = settings

    def validate(self, source: ColumnSource) -> ValidationResult:
        """
        Scan the source until the first violation or the end.

        Args:
            source: Column source to check.

        Returns:
            ValidationResult; never raises for data or I/O problems.
        """
        bit_width = self.settings.bit_width
        max_value = self.settings.max_value
        policy = self.settings.overflow
        rows_checked = 0
        n_overflow = 0

        def invalid(
            kind: ViolationKind, message: str, column: str | None = None, **extra: object
        ) -> ValidationResult:
            return ValidationResult(
                valid=False,
                source=source.path,
                column=column or source.column_label,
                bit_width=bit_width,
                max_value=max_value,
                rows_checked=rows_checked,
                kind=kind,
                message=message,
                **extra,
            )

        try:
            with closing(source.iter_batches()) as batches:
                for batch in batches:
                    rejected = rejected_mask(batch, max_value, policy)
                    if rejected.any():
                        offset = int(np.argmax(rejected))
                        row = batch.row_at(offset)
                        raw = batch.raw(offset)
                        kind = _STATUS_KINDS[int(batch.status[offset])]
                        rows_checked += offset + 1
                        log.error(
                            "Column validation failed",
                            path=str(source.path),
                            row=row,
                            value=raw,
                            reason=kind.value,
                            max_value=max_value,
                            bit_width=bit_width,
                        )
                        message = (
                            f"{kind.value} at row {row}: {raw!r} "
                            f"(max for d={bit_width}: {max_value})"
                        )
                        return invalid(
                            kind,
                            message,
                            row=row,
                            raw=raw,
                        )
                    if policy is not OverflowPolicy.REJECT:
                        n_overflow += int(overflow_mask(batch, max_value).sum())
                    rows_checked += len(batch)
        except SchemaViolationError as e:
            log.error("Column schema violation", path=str(source.path), error=e.message)
            return invalid(ViolationKind.SCHEMA, e.reason, column=e.column)
        except SourceUnreadableError as e:
            log.error("Unable to validate column", path=str(source.path), error=e.message)
            return invalid(ViolationKind.UNREADABLE, e.details.get("reason") or "read error")

        if n_overflow:
            log.warning(
                "Values exceed bit width and will be substituted",
                count=n_overflow,
                policy=policy.value,
                max_value=max_value,
            )
        log.info("Column validation passed", path=str(source.path), rows=rows_checked)
        return ValidationResult(
            valid=True,
            source=source.path,
            column=source.column_label,
            bit_width=bit_width,
            max_value=max_value,
            rows_checked=rows_checked,
        )


def validate_column(path: Path | str, settings: IngestionSettings) -> ValidationResult:
    """
    Convenience function to validate the target column of a file.

    Args:
        path: Path to the source file.
        settings: Ingestion settings.

    Returns:
        ValidationResult for the column.

    Raises:
        UnrecognizedFormatError: If the extension is not recognized.
    """
    return ColumnValidator(settings).validate(open_source(path, settings))
