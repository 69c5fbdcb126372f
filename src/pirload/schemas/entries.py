"""
Pandera schema for the populated entry buffer.

The buffer is checked at the hand-off boundary: exactly N unsigned
64-bit entries, each at most 2^d - 1.
"""

import numpy as np
import pandas as pd
import pandera.pandas as pa

from pirload.errors import EntryVerificationError
from pirload.ingestion.bits import max_value_for

ENTRY_COLUMN = "entry"


def entry_schema(bit_width: int, row_count: int) -> pa.DataFrameSchema:
    """
    Build the entry schema for a bit width and row count.

    Args:
        bit_width: Bits per entry.
        row_count: Required number of entries.

    Returns:
        DataFrameSchema with a single non-nullable uint64 column.
    """
    max_value = max_value_for(bit_width)
    return pa.DataFrameSchema(
        {
            ENTRY_COLUMN: pa.Column(
                "uint64",
                checks=pa.Check.le(max_value),
                nullable=False,
                description=f"Entry value in [0, {max_value}]",
            ),
        },
        checks=pa.Check(
            lambda df: len(df) == row_count,
            element_wise=False,
            error=f"buffer must hold exactly {row_count} entries",
        ),
        name=f"EntrySchema(d={bit_width})",
        strict=True,
        coerce=False,
    )


def verify_entries(entries: np.ndarray, bit_width: int, row_count: int) -> None:
    """
    Validate a populated buffer against the entry schema.

    Args:
        entries: uint64 entry array.
        bit_width: Bits per entry.
        row_count: Required number of entries.

    Raises:
        EntryVerificationError: If any entry or the length is out of contract.
    """
    frame = pd.DataFrame({ENTRY_COLUMN: entries}, copy=False)
    try:
        entry_schema(bit_width, row_count).validate(frame)
    except pa.errors.SchemaError as e:
        raise EntryVerificationError(_format_schema_error(e)) from e


def _format_schema_error(error: pa.errors.SchemaError) -> str:
    """Format a schema error for display (first 5 violations)."""
    failures = getattr(error, "failure_cases", None)
    if isinstance(failures, pd.DataFrame) and not failures.empty:
        n_failures = len(failures)
        shown = failures.head(5).to_string(index=False)
        return f"Entry buffer failed verification ({n_failures} violation(s)):\n{shown}"
    return f"Entry buffer failed verification: {str(error).splitlines()[0][:200]}"
