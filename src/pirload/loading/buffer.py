"""
Entry buffer and the loading pass that fills it.

The buffer is allocated once, zero-initialized, filled by BufferLoader
and then released to the retrieval engine. After release it can no
longer be read or written through the EntryBuffer.
"""

from contextlib import closing
from dataclasses import dataclass

import numpy as np

from pirload.config.settings import IngestionSettings, OverflowPolicy
from pirload.errors import BufferAllocationError, BufferReleasedError
from pirload.ingestion.base import CellBatch, CellStatus, ColumnSource
from pirload.utils.logging import get_logger
from pirload.validation.rules import overflow_mask, unparseable_mask

log = get_logger(__name__)

ENTRY_DTYPE = np.uint64


class EntryBuffer:
    """Ownership-exclusive, fixed-length array of entries."""

    def __init__(self, length: int) -> None:
        """
        Allocate a zero-initialized buffer.

        Args:
            length: Number of entries (N).

        Raises:
            BufferAllocationError: If memory cannot be allocated.
        """
        if length < 0:
            msg = f"length must be non-negative, got: {length}"
            raise ValueError(msg)
        try:
            self._data: np.ndarray | None = np.zeros(length, dtype=ENTRY_DTYPE)
        except MemoryError as e:
            raise BufferAllocationError(length) from e
        self._length = length

    def __len__(self) -> int:
        return self._length

    @property
    def released(self) -> bool:
        """Whether ownership has been handed off."""
        return self._data is None

    @property
    def data(self) -> np.ndarray:
        """
        Writable view of the entries.

        Raises:
            BufferReleasedError: If the buffer was released.
        """
        if self._data is None:
            raise BufferReleasedError
        return self._data

    def release(self) -> np.ndarray:
        """
        Transfer ownership of the underlying array to the caller.

        Returns:
            The entry array; this buffer becomes unusable.

        Raises:
            BufferReleasedError: If the buffer was already released.
        """
        data = self.data
        self._data = None
        return data


@dataclass
class LoadReport:
    """
    Outcome of a loading pass.

    Attributes:
        expected_rows: Buffer length (N).
        rows_loaded: Entries written from source rows.
        row_cap: Row cap in effect (0 = none).
        n_empty: Empty or null cells stored as 0.
        n_malformed: Non-numeric or negative cells stored as 0.
        n_clamped: Oversized values stored as 2^d - 1.
        n_reduced: Oversized values stored modulo 2^d.
    """

    expected_rows: int
    rows_loaded: int = 0
    row_cap: int = 0
    n_empty: int = 0
    n_malformed: int = 0
    n_clamped: int = 0
    n_reduced: int = 0

    @property
    def n_substituted(self) -> int:
        """Cells whose stored value differs from the source value."""
        return self.n_malformed + self.n_clamped + self.n_reduced

    @property
    def complete(self) -> bool:
        """Whether every buffer entry was backed by a source row."""
        return self.rows_loaded == self.expected_rows


class BufferLoader:
    """
    Fills an entry buffer from a column source.

    Per-row policy:
        - empty cell or null: 0
        - non-numeric or negative: 0 (warning)
        - value above 2^d - 1: 2^d - 1 (warning), or value mod 2^d under
          OverflowPolicy.MODULO
        - any other value: value mod 2^d
    """

    def __init__(self, settings: IngestionSettings) -> None:
        """
        Initialize loader.

        Args:
            settings: Ingestion settings carrying bit width, overflow policy
                and the default row cap.
        """
        self.settings = settings

    def load(
        self,
        buffer: EntryBuffer,
        source: ColumnSource,
        row_cap: int | None = None,
    ) -> LoadReport:
        """
        Populate up to min(len(buffer), row_cap) entries from source.

        A source shorter than the buffer is not an error: the remaining
        entries stay zero.

        Args:
            buffer: Zero-initialized destination buffer.
            source: Column source to read.
            row_cap: Maximum rows to load; None uses settings.row_cap, 0 means no cap.

        Returns:
            LoadReport with substitution counts.

        Raises:
            BufferReleasedError: If the buffer was already released.
            SourceUnreadableError: If the source cannot be read.
            SchemaViolationError: If the column is missing or wrongly typed.
        """
        target = buffer.data
        cap = self.settings.row_cap if row_cap is None else row_cap
        limit = len(buffer) if cap == 0 else min(len(buffer), cap)
        report = LoadReport(expected_rows=len(buffer), row_cap=cap)
        warnings_left = self.settings.max_logged_warnings

        with closing(source.iter_batches()) as batches:
            for batch in batches:
                if report.rows_loaded >= limit:
                    break
                take = min(len(batch), limit - report.rows_loaded)
                start = report.rows_loaded
                target[start : start + take] = self._store(batch, take, report)
                warnings_left = self._log_substitutions(batch, take, warnings_left)
                report.rows_loaded += take

        self._log_summary(report)
        return report

    def _store(self, batch: CellBatch, take: int, report: LoadReport) -> np.ndarray:
        """Apply the per-row policy to the first `take` cells of a batch."""
        max_value = self.settings.max_value
        mask = np.uint64(max_value)

        status = batch.status[:take]
        entries = batch.values[:take] & mask
        overflow = overflow_mask(batch, max_value)[:take]
        n_overflow = int(overflow.sum())

        if self.settings.overflow is OverflowPolicy.MODULO:
            report.n_reduced += n_overflow
        else:
            entries[overflow] = mask
            report.n_clamped += n_overflow

        report.n_empty += int((status == CellStatus.EMPTY).sum())
        report.n_malformed += int(unparseable_mask(batch)[:take].sum())
        return entries

    def _log_substitutions(self, batch: CellBatch, take: int, warnings_left: int) -> int:
        """Log per-row warnings until the budget is spent."""
        if warnings_left <= 0:
            return warnings_left

        max_value = self.settings.max_value
        overflow = overflow_mask(batch, max_value)[:take]
        flagged = unparseable_mask(batch)[:take] | overflow
        for offset in np.flatnonzero(flagged)[:warnings_left]:
            offset = int(offset)
            if overflow[offset]:
                stored = "modulo" if self.settings.overflow is OverflowPolicy.MODULO else max_value
                log.warning(
                    "Value too large",
                    row=batch.row_at(offset),
                    value=batch.raw(offset),
                    max_value=max_value,
                    stored=stored,
                )
            else:
                log.warning(
                    "Non-numeric value, stored 0",
                    row=batch.row_at(offset),
                    value=batch.raw(offset),
                )
            warnings_left -= 1
        return warnings_left

    def _log_summary(self, report: LoadReport) -> None:
        if report.n_substituted:
            log.warning(
                "Substituted values while loading",
                malformed=report.n_malformed,
                clamped=report.n_clamped,
                reduced=report.n_reduced,
            )
        if not report.complete:
            if report.row_cap and report.rows_loaded == report.row_cap:
                log.info(
                    "Row cap reached",
                    loaded=report.rows_loaded,
                    expected=report.expected_rows,
                )
            else:
                log.warning(
                    "Source shorter than buffer, remaining entries left at 0",
                    loaded=report.rows_loaded,
                    expected=report.expected_rows,
                )
        log.info("Entries loaded", rows=report.rows_loaded, empty=report.n_empty)
