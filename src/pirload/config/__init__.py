"""
Configuration management with typed Pydantic models.

Provides explicit bit-width and column parameterization and
environment-aware configuration loading.
"""

from pirload.config.loader import apply_overrides, load_config
from pirload.config.settings import (
    AppConfig,
    EngineSettings,
    IngestionSettings,
    LoggingSettings,
    OverflowPolicy,
)

__all__ = [
    "AppConfig",
    "EngineSettings",
    "IngestionSettings",
    "LoggingSettings",
    "OverflowPolicy",
    "apply_overrides",
    "load_config",
]
