"""
Base classes for column sources.

Every format exposes the same two operations: a cheap row count used to
size the entry buffer, and a scan that yields the target column as
batches of classified cells. Validation, loading and statistics consume
those batches, so all passes agree on which rows are data rows.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import ClassVar

import numpy as np

from pirload.config.settings import IngestionSettings
from pirload.ingestion.formats import FileFormat


class CellStatus(IntEnum):
    """Classification of a single cell of the target column."""

    VALUE = 0  # non-negative integer that fits in 64 bits
    EMPTY = 1  # empty text or null
    MALFORMED = 2  # not an integer literal
    NEGATIVE = 3  # negative integer
    OVERSIZED = 4  # non-negative integer wider than 64 bits


@dataclass
class CellBatch:
    """
    A run of consecutive data rows from the target column.

    Attributes:
        start_row: 1-based data-row index of the first cell.
        values: uint64 array. Holds the value for VALUE cells, the low 64 bits
            for OVERSIZED cells and 0 for every other status.
        status: uint8 array of CellStatus codes, same length as values.
        raw: Returns the cell's source text for diagnostics.
    """

    start_row: int
    values: np.ndarray
    status: np.ndarray
    raw: Callable[[int], str]

    def __len__(self) -> int:
        return len(self.values)

    def row_at(self, offset: int) -> int:
        """Data-row index of the cell at offset."""
        return self.start_row + offset


class ColumnSource(ABC):
    """
    Abstract base class for a single-column data source.

    Subclasses implement one file format each.
    """

    format: ClassVar[FileFormat]

    def __init__(self, path: Path, settings: IngestionSettings) -> None:
        """
        Initialize source.

        Args:
            path: Path to the source file.
            settings: Ingestion settings (header policy, column, batch size).
        """
        self.path = Path(path)
        self.settings = settings
        self.read_error: str | None = None

    @property
    def column_label(self) -> str:
        """Selected column name, or a placeholder for the first column."""
        return self.settings.column or "<first column>"

    @abstractmethod
    def count_rows(self) -> int:
        """
        Count data rows.

        An unreadable source counts as 0 and the failure is kept in
        read_error, so callers can tell it apart from an empty source.

        Returns:
            Number of data rows; 0 if the source is empty or unreadable.
        """
        ...

    @abstractmethod
    def iter_batches(self) -> Iterator[CellBatch]:
        """
        Scan the target column.

        Yields:
            CellBatch objects in row order.

        Raises:
            SourceUnreadableError: If the source cannot be read.
            SchemaViolationError: If the column is missing or has an
                unsupported type.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self.path)!r}, column={self.column_label!r})"
