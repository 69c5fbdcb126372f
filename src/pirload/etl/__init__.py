"""
Ingestion pipeline for PIR databases.

Orchestrates format detection, validation, loading and engine hand-off.
"""

from pirload.etl.pipeline import IngestionPipeline, IngestionResult, run_ingestion

__all__ = ["IngestionPipeline", "IngestionResult", "run_ingestion"]
