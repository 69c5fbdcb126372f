"""
Typed configuration models using Pydantic.

The bit width and every other ingestion parameter are explicit fields
threaded through the pipeline. Nothing here is inferred from data.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_BIT_WIDTH = 64


class OverflowPolicy(str, Enum):
    """How values above 2^d - 1 are treated by validation and loading."""

    REJECT = "reject"  # validation fails; loader substitutes the clamp value
    CLAMP = "clamp"  # validation passes; loader stores 2^d - 1
    MODULO = "modulo"  # validation passes; loader stores value mod 2^d


class IngestionSettings(BaseModel):
    """Parameters for one ingestion call."""

    model_config = ConfigDict(frozen=True)

    bit_width: int = Field(
        default=2,
        ge=1,
        le=MAX_BIT_WIDTH,
        description="Number of bits per entry (values lie in [0, 2^d - 1])",
    )
    has_header: bool = Field(
        default=True, description="Whether delimited text starts with a header line"
    )
    column: str | None = Field(
        default=None, description="Column name to ingest (default: first column)"
    )
    row_cap: int = Field(
        default=0, ge=0, description="Maximum number of rows to load (0 = no cap)"
    )
    overflow: OverflowPolicy = Field(
        default=OverflowPolicy.REJECT,
        description="Treatment of values that exceed the bit width",
    )
    delimiter: str = Field(default=",", description="Field delimiter for delimited text")
    encoding: str = Field(default="utf-8-sig", description="Text encoding for delimited text")
    batch_size: int = Field(
        default=65_536, ge=1, description="Rows per batch when scanning a source"
    )
    max_logged_warnings: int = Field(
        default=20,
        ge=0,
        description="Per-row load warnings logged before only a summary is reported",
    )
    verify_entries: bool = Field(
        default=True,
        description="Validate the populated buffer against the entry schema before hand-off",
    )

    @field_validator("delimiter")
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Ensure the delimiter is a single character."""
        if len(v) != 1:
            msg = f"delimiter must be a single character, got: {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("column")
    @classmethod
    def validate_column(cls, v: str | None) -> str | None:
        """Treat a blank column name as 'first column'."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def max_value(self) -> int:
        """Largest representable entry, 2^d - 1."""
        return (1 << self.bit_width) - 1


class EngineSettings(BaseModel):
    """Construction options forwarded to the retrieval engine."""

    model_config = ConfigDict(frozen=True)

    allow_trivial: bool = Field(
        default=True, description="Allow trivial parameter sets for small databases"
    )
    simple_pir: bool = Field(default=False, description="Use the SimplePIR variant")
    batch_size: int = Field(default=1, ge=1, description="Queries answered per batch")
    honest_hint: bool = Field(default=False, description="Assume an honestly generated hint")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(default=False, description="Emit logs as JSON lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the log level is a known level name."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            msg = f"level must be one of {sorted(valid)}, got: {v!r}"
            raise ValueError(msg)
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def bit_width(self) -> int:
        """Convenience accessor for the configured bit width."""
        return self.ingestion.bit_width
