"""
Schema definitions using Pandera for data validation.

The entry buffer handed to the retrieval engine is validated here.
"""

from pirload.schemas.entries import ENTRY_COLUMN, entry_schema, verify_entries

__all__ = [
    "ENTRY_COLUMN",
    "entry_schema",
    "verify_entries",
]
