"""
Configuration loading utilities.

Supports environment variable interpolation, inheritance from a sibling
base.yaml, and command-line overrides.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from pirload.config.settings import (
    AppConfig,
    EngineSettings,
    IngestionSettings,
    LoggingSettings,
)

KNOWN_SECTIONS = ("ingestion", "engine", "logging")


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return _process_config_values(data)


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> AppConfig:
    """
    Load application configuration from YAML file(s).

    All sections are optional; missing values fall back to the defaults
    in the settings models.

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.
            Defaults to base.yaml next to config_path when present.

    Returns:
        Fully validated AppConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        potential_base = config_path.parent / "base.yaml"
        if potential_base.exists() and potential_base.resolve() != config_path.resolve():
            base_data = load_yaml(potential_base)
        else:
            base_data = {}

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    unknown = sorted(set(merged) - set(KNOWN_SECTIONS))
    if unknown:
        msg = f"Unknown config section(s): {', '.join(unknown)}"
        raise ValueError(msg)

    return AppConfig(
        ingestion=IngestionSettings(**(merged.get("ingestion") or {})),
        engine=EngineSettings(**(merged.get("engine") or {})),
        logging=LoggingSettings(**(merged.get("logging") or {})),
    )


def apply_overrides(config: AppConfig, **ingestion_overrides: Any) -> AppConfig:
    """
    Return a copy of config with ingestion fields overridden.

    Overrides whose value is None are ignored so that unset command-line
    options keep the configured value.

    Args:
        config: Base configuration.
        **ingestion_overrides: IngestionSettings field values.

    Returns:
        New AppConfig with the overrides validated and applied.
    """
    updates = {k: v for k, v in ingestion_overrides.items() if v is not None}
    if not updates:
        return config
    ingestion = IngestionSettings(**{**config.ingestion.model_dump(), **updates})
    return config.model_copy(update={"ingestion": ingestion})
