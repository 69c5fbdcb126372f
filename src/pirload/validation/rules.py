"""
Per-cell rules shared by the validation and loading passes.

Both passes classify cells with the same masks so that the overflow
policy is applied consistently.
"""

import numpy as np

from pirload.config.settings import OverflowPolicy
from pirload.ingestion.base import CellBatch, CellStatus


def overflow_mask(batch: CellBatch, max_value: int) -> np.ndarray:
    """Cells holding an integer larger than max_value."""
    too_large = (batch.status == CellStatus.VALUE) & (batch.values > np.uint64(max_value))
    return too_large | (batch.status == CellStatus.OVERSIZED)


def unparseable_mask(batch: CellBatch) -> np.ndarray:
    """Cells that are not a non-negative integer."""
    return (batch.status == CellStatus.MALFORMED) | (batch.status == CellStatus.NEGATIVE)


def rejected_mask(batch: CellBatch, max_value: int, policy: OverflowPolicy) -> np.ndarray:
    """
    Cells that make the column invalid.

    Parse failures and negatives are always rejected. Overflowing values
    are rejected only under OverflowPolicy.REJECT.
    """
    rejected = unparseable_mask(batch)
    if policy is OverflowPolicy.REJECT:
        rejected = rejected | overflow_mask(batch, max_value)
    return rejected
