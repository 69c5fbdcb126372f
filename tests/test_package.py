"""Basic package tests to verify installation."""


def test_package_imports() -> None:
    """Verify the main package can be imported."""
    import pirload

    assert pirload.__version__


def test_config_module_imports() -> None:
    """Verify config module structure is correct."""
    from pirload.config import (
        AppConfig,
        EngineSettings,
        IngestionSettings,
        LoggingSettings,
        OverflowPolicy,
        apply_overrides,
        load_config,
    )

    assert AppConfig is not None
    assert EngineSettings is not None
    assert IngestionSettings is not None
    assert LoggingSettings is not None
    assert OverflowPolicy is not None
    assert apply_overrides is not None
    assert load_config is not None


def test_pipeline_module_imports() -> None:
    """Verify every pipeline stage is importable."""
    from pirload.engine import InMemoryEngine, RetrievalEngine
    from pirload.etl import IngestionPipeline, run_ingestion
    from pirload.ingestion import count_rows, detect_file_format, open_source
    from pirload.loading import BufferLoader, EntryBuffer
    from pirload.schemas import verify_entries
    from pirload.stats import StatsReporter, compute_stats
    from pirload.validation import ColumnValidator, validate_column

    assert InMemoryEngine is not None
    assert RetrievalEngine is not None
    assert IngestionPipeline is not None
    assert run_ingestion is not None
    assert count_rows is not None
    assert detect_file_format is not None
    assert open_source is not None
    assert BufferLoader is not None
    assert EntryBuffer is not None
    assert verify_entries is not None
    assert StatsReporter is not None
    assert compute_stats is not None
    assert ColumnValidator is not None
    assert validate_column is not None


def test_cli_imports() -> None:
    """Verify CLI can be imported."""
    from pirload.cli import app

    assert app is not None
