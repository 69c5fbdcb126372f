"""
Retrieval engine contract.

The ingestion pipeline hands the populated entry array to an engine's
build routine, which takes ownership of it. InMemoryEngine is the
in-process reference engine used by the command line and the tests.
"""

from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np

from pirload.config.settings import EngineSettings
from pirload.ingestion.bits import storage_bytes
from pirload.utils.logging import get_logger

log = get_logger(__name__)


class RetrievalEngine(Protocol):
    """Anything that can construct a database from a populated entry array."""

    def build(self, n: int, bit_width: int, entries: np.ndarray) -> Any:
        """
        Construct a database, taking ownership of entries.

        Args:
            n: Number of entries.
            bit_width: Bits per entry.
            entries: uint64 array of length n, every value below 2^bit_width.

        Returns:
            Engine-specific database handle.
        """
        ...


@dataclass
class DatabaseHandle:
    """Read-only view of a database held by InMemoryEngine."""

    n: int
    bit_width: int
    entries: np.ndarray
    settings: EngineSettings

    def get(self, index: int) -> int:
        """
        Return the entry at index.

        Raises:
            IndexError: If index is outside [0, n).
        """
        if not 0 <= index < self.n:
            msg = f"index {index} out of range for database of {self.n} entries"
            raise IndexError(msg)
        return int(self.entries[index])

    @property
    def size_bytes(self) -> int:
        """Packed size of the database, floor(n * d / 8)."""
        return storage_bytes(self.n, self.bit_width)


class InMemoryEngine:
    """Reference engine that keeps the entries in process memory."""

    def __init__(self, settings: EngineSettings | None = None) -> None:
        """
        Initialize engine.

        Args:
            settings: Construction options recorded on every handle.
        """
        self.settings = settings or EngineSettings()

    def build(self, n: int, bit_width: int, entries: np.ndarray) -> DatabaseHandle:
        """
        Construct a database from entries.

        Raises:
            ValueError: If the entry array does not hold exactly n entries.
        """
        if len(entries) != n:
            msg = f"expected {n} entries, got {len(entries)}"
            raise ValueError(msg)
        entries.flags.writeable = False
        log.info(
            "Database constructed",
            n=n,
            bit_width=bit_width,
            simple_pir=self.settings.simple_pir,
            batch_size=self.settings.batch_size,
        )
        return DatabaseHandle(n=n, bit_width=bit_width, entries=entries, settings=self.settings)
