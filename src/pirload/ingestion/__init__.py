"""
Data ingestion layer for reading one integer column from a file.

All source access happens through this module so that every pass sees
the same data rows.
"""

from pirload.ingestion.base import CellBatch, CellStatus, ColumnSource
from pirload.ingestion.bits import calculate_bit_size, max_value_for, storage_bytes
from pirload.ingestion.columnar import ColumnarSource
from pirload.ingestion.delimited import DelimitedTextSource, parse_cell
from pirload.ingestion.formats import FileFormat, detect_file_format
from pirload.ingestion.sources import count_rows, open_source

__all__ = [
    "CellBatch",
    "CellStatus",
    "ColumnSource",
    "ColumnarSource",
    "DelimitedTextSource",
    "FileFormat",
    "calculate_bit_size",
    "count_rows",
    "detect_file_format",
    "max_value_for",
    "open_source",
    "parse_cell",
    "storage_bytes",
]
