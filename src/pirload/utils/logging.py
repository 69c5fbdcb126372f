"""
Structured logging configuration using structlog.

Log lines are written to stderr unless another stream is given; stdout is
reserved for command output such as tables and query results.
"""

import logging
import sys
from typing import IO, Any

import structlog

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def resolve_level(level: str | int) -> int:
    """
    Translate a level name or number into a logging level.

    Args:
        level: Level name (case-insensitive) or numeric level.

    Returns:
        Numeric logging level.

    Raises:
        ValueError: If the name is not one of LEVEL_NAMES.
    """
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in LEVEL_NAMES:
        msg = f"Unknown log level {level!r}; expected one of {', '.join(LEVEL_NAMES)}"
        raise ValueError(msg)
    return logging.getLevelName(name)


def _processors(json_output: bool, stream: IO[str]) -> list[structlog.types.Processor]:
    """Processor chain ending in a JSON or console renderer."""
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        colors = hasattr(stream, "isatty") and stream.isatty()
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    return processors


def configure_logging(
    level: str | int = "INFO",
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """
    Configure structured logging for the application.

    May be called more than once; the CLI reconfigures after reading the
    config file.

    Args:
        level: Log level name or number.
        json_output: If True, output logs as JSON lines.
        stream: Destination for log lines, stderr by default.

    Raises:
        ValueError: If the level name is unknown.
    """
    log_level = resolve_level(level)
    out = stream if stream is not None else sys.stderr

    # Third-party libraries log through the stdlib
    logging.basicConfig(format="%(message)s", stream=out, level=log_level, force=True)

    structlog.configure(
        processors=_processors(json_output, out),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance, typically for the calling module's __name__."""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> structlog.contextvars.bound_contextvars:
    """
    Context manager for adding context to all logs within the block.

    Example:
        with log_context(source="data.csv", bit_width=8):
            log.info("Loading entries")  # includes source and bit_width

    Args:
        **kwargs: Key-value pairs to add to log context.

    Returns:
        Context manager that binds the values.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
