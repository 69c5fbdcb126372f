"""File format detection by extension."""

from enum import Enum
from pathlib import Path


class FileFormat(str, Enum):
    """Closed set of recognized source formats."""

    DELIMITED_TEXT = "csv"
    COLUMNAR_BINARY = "parquet"
    UNRECOGNIZED = "unrecognized"


_EXTENSIONS: dict[str, FileFormat] = {
    ".csv": FileFormat.DELIMITED_TEXT,
    ".parquet": FileFormat.COLUMNAR_BINARY,
}


def detect_file_format(path: Path | str) -> FileFormat:
    """
    Map a file path to its format using the lowercased extension only.

    The file is never opened. UNRECOGNIZED is not an error by itself;
    callers must refuse to ingest it.

    Args:
        path: Path to the source file.

    Returns:
        Detected FileFormat.
    """
    suffix = Path(path).suffix.lower()
    return _EXTENSIONS.get(suffix, FileFormat.UNRECOGNIZED)
