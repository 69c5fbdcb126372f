"""
Delimited text (CSV) column source.

Data rows are the physical lines after the optional header that contain
at least one character other than space, tab, CR or LF. The header line
is discarded unconditionally when present, even if nothing follows it.

Lines end at LF only, and fields are split on the delimiter without
quote handling, so one data line always yields exactly one cell.
"""

import re
from collections.abc import Iterator
from typing import IO

import numpy as np

from pirload.errors import SchemaViolationError, SourceUnreadableError
from pirload.ingestion.base import CellBatch, CellStatus, ColumnSource
from pirload.ingestion.bits import UINT64_MAX
from pirload.ingestion.formats import FileFormat
from pirload.utils.logging import get_logger

log = get_logger(__name__)

_UNSIGNED = re.compile(r"[0-9]+")
_SIGNED_NEGATIVE = re.compile(r"-[0-9]+")

_BLANK = " \t\r\n"
_LINE_END = "\n"

# uint64 max has 20 decimal digits
_MAX_DIGITS = 20
_HORNER_CHUNK = 18


def _low_bits(digits: str) -> int:
    """Low 64 bits of an arbitrarily long decimal literal."""
    value = 0
    step = 10**_HORNER_CHUNK
    head = len(digits) % _HORNER_CHUNK
    if head:
        value = int(digits[:head])
    for pos in range(head, len(digits), _HORNER_CHUNK):
        value = (value * step + int(digits[pos : pos + _HORNER_CHUNK])) & UINT64_MAX
    return value


def parse_cell(text: str) -> tuple[CellStatus, int]:
    """
    Classify a trimmed cell as an entry candidate.

    Only plain decimal literals are accepted: no sign, no separators,
    no exponent.

    Args:
        text: Cell text with surrounding spaces, tabs, CR and LF removed.

    Returns:
        (status, value) where value is 0 unless status is VALUE or OVERSIZED.
    """
    if not text:
        return CellStatus.EMPTY, 0
    if _UNSIGNED.fullmatch(text):
        digits = text.lstrip("0") or "0"
        if len(digits) <= _MAX_DIGITS:
            value = int(digits)
            if value <= UINT64_MAX:
                return CellStatus.VALUE, value
        return CellStatus.OVERSIZED, _low_bits(digits)
    if _SIGNED_NEGATIVE.fullmatch(text):
        return CellStatus.NEGATIVE, 0
    return CellStatus.MALFORMED, 0


class DelimitedTextSource(ColumnSource):
    """Column source for comma (or other single-character) delimited text."""

    format = FileFormat.DELIMITED_TEXT

    def _open(self) -> IO[str]:
        return self.path.open(encoding=self.settings.encoding, newline=_LINE_END)

    @staticmethod
    def _data_lines(handle: IO[str]) -> Iterator[str]:
        """Lines holding at least one character other than space, tab, CR or LF."""
        for line in handle:
            if line.strip(_BLANK):
                yield line

    def _split(self, line: str) -> list[str]:
        return line.rstrip(_BLANK).split(self.settings.delimiter)

    def count_rows(self) -> int:
        """Count non-blank lines after the optional header."""
        self.read_error = None
        try:
            with self._open() as handle:
                if self.settings.has_header:
                    handle.readline()
                return sum(1 for _ in self._data_lines(handle))
        except (OSError, UnicodeDecodeError) as e:
            self.read_error = str(e)
            log.error("Unable to count rows", path=str(self.path), error=self.read_error)
            return 0

    def _resolve_column_index(self, handle: IO[str]) -> int:
        """
        Consume the header line (if any) and locate the target column.

        Raises:
            SchemaViolationError: If a column name is requested but there is
                no header, or the header lacks that name.
        """
        header = handle.readline() if self.settings.has_header else None
        column = self.settings.column
        if column is None:
            return 0
        if header is None:
            raise SchemaViolationError(column, "column names require a header line")

        names = [name.strip(_BLANK) for name in self._split(header)]
        if column not in names:
            available = ", ".join(names) or "none"
            raise SchemaViolationError(column, f"column not found (available: {available})")
        return names.index(column)

    def iter_batches(self) -> Iterator[CellBatch]:
        """Scan the target column in batches of settings.batch_size rows."""
        batch_size = self.settings.batch_size
        try:
            with self._open() as handle:
                index = self._resolve_column_index(handle)
                start_row = 1
                texts: list[str] = []
                for line in self._data_lines(handle):
                    fields = self._split(line)
                    texts.append(fields[index].strip(_BLANK) if index < len(fields) else "")
                    if len(texts) == batch_size:
                        yield _build_batch(start_row, texts)
                        start_row += len(texts)
                        texts = []
                if texts:
                    yield _build_batch(start_row, texts)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnreadableError(self.path, str(e)) from e


def _build_batch(start_row: int, texts: list[str]) -> CellBatch:
    """Classify a list of cell texts into a CellBatch."""
    n = len(texts)
    status = np.empty(n, dtype=np.uint8)
    values = np.zeros(n, dtype=np.uint64)
    for i, text in enumerate(texts):
        cell_status, value = parse_cell(text)
        status[i] = cell_status
        if value:
            values[i] = value
    return CellBatch(start_row=start_row, values=values, status=status, raw=texts.__getitem__)
