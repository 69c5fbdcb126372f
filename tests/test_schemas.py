"""Tests for the Pandera entry schema."""

import numpy as np
import pandas as pd
import pandera.pandas as pa
import pytest

from pirload.errors import EntryVerificationError
from pirload.schemas import ENTRY_COLUMN, entry_schema, verify_entries


class TestEntrySchema:
    """Tests for entry_schema and verify_entries."""

    def test_valid_entries(self) -> None:
        """Test that in-range entries of the right length pass."""
        entries = np.array([0, 1, 2, 3], dtype=np.uint64)
        verify_entries(entries, bit_width=2, row_count=4)

    def test_full_width(self) -> None:
        """Test the uint64 maximum at d=64."""
        entries = np.array([0, 2**64 - 1], dtype=np.uint64)
        verify_entries(entries, bit_width=64, row_count=2)

    def test_value_above_bound(self) -> None:
        """Test that an entry of 2^d fails verification."""
        entries = np.array([0, 4], dtype=np.uint64)

        with pytest.raises(EntryVerificationError, match="failed verification"):
            verify_entries(entries, bit_width=2, row_count=2)

    def test_wrong_length(self) -> None:
        """Test that the buffer length must equal the row count."""
        entries = np.zeros(3, dtype=np.uint64)

        with pytest.raises(EntryVerificationError):
            verify_entries(entries, bit_width=2, row_count=4)

    def test_wrong_dtype(self) -> None:
        """Test that signed entries are rejected."""
        entries = np.array([1, 2], dtype=np.int64)

        with pytest.raises(EntryVerificationError):
            verify_entries(entries, bit_width=2, row_count=2)

    def test_schema_is_strict(self) -> None:
        """Test that extra columns are rejected by the schema itself."""
        frame = pd.DataFrame(
            {
                ENTRY_COLUMN: np.array([1], dtype=np.uint64),
                "extra": [1],
            }
        )

        with pytest.raises(pa.errors.SchemaError):
            entry_schema(bit_width=2, row_count=1).validate(frame)
