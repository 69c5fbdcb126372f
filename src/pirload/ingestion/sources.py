"""Source resolution: pick the ColumnSource implementation for a path."""

from pathlib import Path

from pirload.config.settings import IngestionSettings
from pirload.errors import UnrecognizedFormatError
from pirload.ingestion.base import ColumnSource
from pirload.ingestion.columnar import ColumnarSource
from pirload.ingestion.delimited import DelimitedTextSource
from pirload.ingestion.formats import FileFormat, detect_file_format

SOURCE_TYPES: dict[FileFormat, type[ColumnSource]] = {
    FileFormat.DELIMITED_TEXT: DelimitedTextSource,
    FileFormat.COLUMNAR_BINARY: ColumnarSource,
}


def open_source(path: Path | str, settings: IngestionSettings) -> ColumnSource:
    """
    Resolve a path to a column source without reading it.

    Args:
        path: Path to the source file.
        settings: Ingestion settings.

    Returns:
        ColumnSource for the detected format.

    Raises:
        UnrecognizedFormatError: If the extension is not recognized.
    """
    path = Path(path)
    file_format = detect_file_format(path)
    source_type = SOURCE_TYPES.get(file_format)
    if source_type is None:
        raise UnrecognizedFormatError(path)
    return source_type(path, settings)


def count_rows(path: Path | str, settings: IngestionSettings) -> int:
    """
    Convenience function to count data rows in a file.

    Returns:
        Number of data rows; 0 if the source is empty or unreadable.

    Raises:
        UnrecognizedFormatError: If the extension is not recognized.
    """
    return open_source(path, settings).count_rows()
