"""
Ingestion pipeline implementation.

Turns a CSV or Parquet file into a populated entry array and hands it
to a retrieval engine:

    detect format -> count rows -> validate -> allocate -> load
    -> verify -> release to engine
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pirload.config.settings import IngestionSettings
from pirload.engine import InMemoryEngine, RetrievalEngine
from pirload.errors import EmptySourceError, SourceUnreadableError, UnrecognizedFormatError
from pirload.ingestion.formats import FileFormat, detect_file_format
from pirload.ingestion.sources import open_source
from pirload.loading.buffer import BufferLoader, EntryBuffer, LoadReport
from pirload.schemas.entries import verify_entries
from pirload.utils.logging import get_logger, log_context
from pirload.validation.core import ColumnValidator, ValidationResult

log = get_logger(__name__)


@dataclass
class IngestionResult:
    """
    Result of a successful ingestion.

    Attributes:
        handle: Database handle returned by the engine.
        path: Source file.
        format: Detected file format.
        row_count: Number of entries (N).
        bit_width: Bits per entry (d).
        validation: Result of the validation pass.
        load_report: Substitution counts from the loading pass.
    """

    handle: Any
    path: Path
    format: FileFormat
    row_count: int
    bit_width: int
    validation: ValidationResult
    load_report: LoadReport


class IngestionPipeline:
    """
    Runs one ingestion call against a retrieval engine.

    Each pass re-opens the source; nothing is cached between passes.
    Every fatal condition is raised as an IngestionError subclass.
    """

    def __init__(
        self,
        settings: IngestionSettings,
        engine: RetrievalEngine | None = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            settings: Ingestion settings.
            engine: Engine that takes ownership of the entries. Defaults to
                an InMemoryEngine.
        """
        self.settings = settings
        self.engine = engine if engine is not None else InMemoryEngine()
        self.validator = ColumnValidator(settings)
        self.loader = BufferLoader(settings)

    def run(self, path: Path | str) -> IngestionResult:
        """
        Ingest a file.

        Args:
            path: Path to a .csv or .parquet file.

        Returns:
            IngestionResult with the engine's database handle.

        Raises:
            UnrecognizedFormatError: Extension is not recognized.
            SourceUnreadableError: Source cannot be opened or read.
            EmptySourceError: Source has no data rows.
            SchemaViolationError: Column missing or wrongly typed.
            ColumnValidationError: A value is malformed, negative or too large.
            BufferAllocationError: Entry buffer cannot be allocated.
            EntryVerificationError: Populated buffer violates the entry schema.
        """
        path = Path(path)
        file_format = detect_file_format(path)
        if file_format is FileFormat.UNRECOGNIZED:
            log.error("Unrecognized file format", path=str(path))
            raise UnrecognizedFormatError(path)

        bit_width = self.settings.bit_width
        with log_context(source=str(path), bit_width=bit_width):
            log.info("Starting ingestion", format=file_format.value)
            source = open_source(path, self.settings)

            n = source.count_rows()
            if n == 0:
                if source.read_error is not None:
                    raise SourceUnreadableError(path, source.read_error)
                if not path.is_file():
                    raise SourceUnreadableError(path, "file not found")
                raise EmptySourceError(path)
            log.info("Counted rows", rows=n)

            validation = self.validator.validate(source)
            validation.raise_for_violation()

            buffer = EntryBuffer(n)
            report = self.loader.load(buffer, source)

            if self.settings.verify_entries:
                verify_entries(buffer.data, bit_width, n)

            handle = self.engine.build(n, bit_width, buffer.release())
            log.info("Ingestion complete", rows=n, loaded=report.rows_loaded)

        return IngestionResult(
            handle=handle,
            path=path,
            format=file_format,
            row_count=n,
            bit_width=bit_width,
            validation=validation,
            load_report=report,
        )


def run_ingestion(
    path: Path | str,
    settings: IngestionSettings,
    engine: RetrievalEngine | None = None,
) -> IngestionResult:
    """
    Convenience function to run the ingestion pipeline.

    Args:
        path: Path to a .csv or .parquet file.
        settings: Ingestion settings.
        engine: Engine that takes ownership of the entries.

    Returns:
        IngestionResult with the engine's database handle.
    """
    return IngestionPipeline(settings, engine).run(path)
