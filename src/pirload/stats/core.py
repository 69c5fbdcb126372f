"""
Descriptive statistics for a column source.

Statistics are diagnostic only and never influence ingestion.
"""

from contextlib import closing
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from pirload.config.settings import IngestionSettings
from pirload.ingestion.base import CellStatus, ColumnSource
from pirload.ingestion.bits import max_value_for, storage_bytes
from pirload.ingestion.formats import FileFormat
from pirload.ingestion.sources import open_source
from pirload.utils.logging import get_logger

log = get_logger(__name__)

BYTES_PER_MIB = 1024 * 1024


@dataclass(frozen=True)
class SourceStats:
    """
    Aggregate statistics for the target column of a source.

    Attributes:
        path: Source file.
        format: Detected file format.
        column: Column label.
        row_count: Data rows as counted for buffer sizing.
        bit_width: Configured bits per entry.
        max_allowed: Configured maximum value, 2^d - 1.
        observed_min: Smallest parsed value, None if no value parsed.
        observed_max: Largest parsed value, None if no value parsed.
        n_values: Number of cells counted toward the observed range.
    """

    path: Path
    format: FileFormat
    column: str
    row_count: int
    bit_width: int
    max_allowed: int
    observed_min: int | None
    observed_max: int | None
    n_values: int

    @property
    def storage_bytes(self) -> int:
        """Packed storage size, floor(N * d / 8)."""
        return storage_bytes(self.row_count, self.bit_width)

    @property
    def storage_mib(self) -> float:
        """Packed storage size in MiB."""
        return self.storage_bytes / BYTES_PER_MIB

    @property
    def fits(self) -> bool:
        """Whether every observed value is within the configured maximum."""
        return self.observed_max is None or self.observed_max <= self.max_allowed


def compute_stats(source: ColumnSource, bit_width: int) -> SourceStats:
    """
    Compute statistics for a source.

    Malformed and empty cells are skipped when computing the observed
    range, as are values wider than 64 bits. Negative Parquet integers
    count as 0, the value they load as; negative CSV literals are skipped.

    Args:
        source: Column source to scan.
        bit_width: Bits per entry used for the allowed range and storage size.

    Returns:
        SourceStats for the source.

    Raises:
        SourceUnreadableError: If the source cannot be read.
        SchemaViolationError: If the column is missing or wrongly typed.
    """
    max_allowed = max_value_for(bit_width)
    row_count = source.count_rows()

    observed_min: int | None = None
    observed_max: int | None = None
    n_values = 0

    counted = [CellStatus.VALUE]
    if source.format is FileFormat.COLUMNAR_BINARY:
        counted.append(CellStatus.NEGATIVE)

    with closing(source.iter_batches()) as batches:
        for batch in batches:
            parsed = batch.values[np.isin(batch.status, counted)]
            if parsed.size == 0:
                continue
            n_values += int(parsed.size)
            lo, hi = int(parsed.min()), int(parsed.max())
            observed_min = lo if observed_min is None else min(observed_min, lo)
            observed_max = hi if observed_max is None else max(observed_max, hi)

    stats = SourceStats(
        path=source.path,
        format=source.format,
        column=source.column_label,
        row_count=row_count,
        bit_width=bit_width,
        max_allowed=max_allowed,
        observed_min=observed_min,
        observed_max=observed_max,
        n_values=n_values,
    )
    log.debug(
        "Computed source statistics",
        path=str(source.path),
        rows=row_count,
        observed_min=observed_min,
        observed_max=observed_max,
    )
    return stats


def source_stats(path: Path | str, settings: IngestionSettings) -> SourceStats:
    """
    Convenience function to compute statistics for a file.

    Raises:
        UnrecognizedFormatError: If the extension is not recognized.
    """
    return compute_stats(open_source(path, settings), settings.bit_width)
