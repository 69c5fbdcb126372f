"""
Columnar binary (Parquet) column source.

Row counts come from file metadata. The target column must be stored as
int64 or uint64; any other type is rejected regardless of content.
"""

from collections.abc import Iterator
from contextlib import closing

import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq

from pirload.errors import SchemaViolationError, SourceUnreadableError
from pirload.ingestion.base import CellBatch, CellStatus, ColumnSource
from pirload.ingestion.formats import FileFormat
from pirload.utils.logging import get_logger

log = get_logger(__name__)


class ColumnarSource(ColumnSource):
    """Column source for Parquet files."""

    format = FileFormat.COLUMNAR_BINARY

    def _open(self) -> pq.ParquetFile:
        return pq.ParquetFile(self.path)

    def count_rows(self) -> int:
        """Total row count from the file metadata; column selection is ignored."""
        self.read_error = None
        try:
            with closing(self._open()) as parquet_file:
                return parquet_file.metadata.num_rows
        except (OSError, pa.ArrowException) as e:
            self.read_error = str(e)
            log.error("Unable to count rows", path=str(self.path), error=self.read_error)
            return 0

    def resolve_field(self, parquet_file: pq.ParquetFile) -> pa.Field:
        """
        Locate the target column and check its storage type.

        Raises:
            SchemaViolationError: If the column is missing or is not int64/uint64.
        """
        schema = parquet_file.schema_arrow
        if len(schema.names) == 0:
            raise SchemaViolationError(self.settings.column, "file has no columns")

        name = self.settings.column or schema.names[0]
        if name not in schema.names:
            available = ", ".join(schema.names)
            raise SchemaViolationError(name, f"column not found (available: {available})")

        field = schema.field(name)
        if not (pa.types.is_int64(field.type) or pa.types.is_uint64(field.type)):
            raise SchemaViolationError(
                name, f"unsupported column type {field.type} (must be int64 or uint64)"
            )
        return field

    def iter_batches(self) -> Iterator[CellBatch]:
        """Scan the target column one record batch at a time."""
        try:
            with closing(self._open()) as parquet_file:
                field = self.resolve_field(parquet_file)
                signed = pa.types.is_int64(field.type)
                start_row = 1
                for record_batch in parquet_file.iter_batches(
                    batch_size=self.settings.batch_size, columns=[field.name]
                ):
                    array = record_batch.column(0)
                    if len(array) == 0:
                        continue
                    yield _build_batch(start_row, array, signed=signed)
                    start_row += len(array)
        except (OSError, pa.ArrowException) as e:
            raise SourceUnreadableError(self.path, str(e)) from e


def _build_batch(start_row: int, array: pa.Array, *, signed: bool) -> CellBatch:
    """Classify an int64/uint64 arrow array into a CellBatch."""
    nulls = array.is_null().to_numpy(zero_copy_only=False)
    raw_values = array.fill_null(0).to_numpy(zero_copy_only=False)

    status = np.full(len(raw_values), CellStatus.VALUE, dtype=np.uint8)
    status[nulls] = CellStatus.EMPTY

    if signed:
        negative = raw_values < 0
        status[negative] = CellStatus.NEGATIVE
        values = np.where(negative, 0, raw_values).astype(np.uint64)
    else:
        values = raw_values.astype(np.uint64, copy=False)

    def raw(offset: int) -> str:
        if nulls[offset]:
            return ""
        return str(raw_values[offset].item())

    return CellBatch(start_row=start_row, values=values, status=status, raw=raw)
