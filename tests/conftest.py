"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest
import structlog

from pirload.config import IngestionSettings


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Restore structlog defaults so no test inherits a CLI-captured stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def settings() -> IngestionSettings:
    """Default ingestion settings (d=2, header present, reject policy)."""
    return IngestionSettings()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing text to a .csv file (or another name) under tmp_path."""

    def _write(content: str, name: str = "db.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_parquet(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a single- or multi-column Parquet file under tmp_path."""

    def _write(
        columns: dict[str, pa.Array | list],
        name: str = "db.parquet",
        row_group_size: int | None = None,
    ) -> Path:
        path = tmp_path / name
        table = pa.table(columns)
        pq.write_table(table, path, row_group_size=row_group_size)
        return path

    return _write


@pytest.fixture
def scenario_a(write_csv: Callable[..., Path]) -> Path:
    """Header plus rows 1, 2, 3."""
    return write_csv("value\n1\n2\n3\n")


@pytest.fixture
def scenario_b(write_csv: Callable[..., Path]) -> Path:
    """Header plus rows 0, 7 (7 exceeds d=2)."""
    return write_csv("value\n0\n7\n")


@pytest.fixture
def scenario_c(write_csv: Callable[..., Path]) -> Path:
    """Header plus rows 2, abc."""
    return write_csv("value\n2\nabc\n")
