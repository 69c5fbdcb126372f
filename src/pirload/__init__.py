"""
pirload: column ingestion for private information retrieval databases.

This package reads one integer column from a CSV or Parquet file,
validates it against a bit width and materializes the dense entry
buffer consumed by a PIR engine.
"""

from importlib.metadata import version

__version__ = version("pirload")

__all__ = ["__version__"]
