"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (ENTSCHEMA__SECTION__KEY)
3. Project YAML (./entschema.yaml, or an explicit --config path)
4. Global YAML (~/.config/entschema/config.yaml)
5. Built-in defaults (this file)

Examples:
    ENTSCHEMA__LOGGING__LEVEL=DEBUG
    ENTSCHEMA__INGEST__MAX_WORKERS=4
    ENTSCHEMA__MERGE__HINT_POLICY=compatible
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
HintPolicy = Literal["advisory", "compatible"]
InheritanceMode = Literal["direct", "transitive"]
IdentifierGrammar = Literal["rust", "python"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        ENTSCHEMA__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every hint/cascade agreement.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IngestConfig(BaseModel):
    """Entity corpus ingestion.

    Env vars:
        ENTSCHEMA__INGEST__MAX_WORKERS: Concurrent decode workers
        ENTSCHEMA__INGEST__EXECUTOR: thread or process
    """

    max_workers: int | None = Field(
        default=None,
        description="Concurrent decode workers. None uses the host's available parallelism.",
    )
    executor: Literal["thread", "process"] = Field(
        default="thread",
        description="Worker kind. Process workers need a picklable decoder.",
    )
    map_extensions: list[str] = Field(
        default_factory=lambda: [".bsp"],
        description="Extensions picked up when a directory is given as input.",
    )
    excluded_properties: list[str] = Field(
        default_factory=lambda: ["classname", "hammerid"],
        description="Keys never aggregated as properties.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v


class SdkConfig(BaseModel):
    """Static hint extraction over engine source text."""

    source_extensions: list[str] = Field(default_factory=lambda: [".h", ".cpp"])
    key_value_method: str = Field(
        default="KeyValue",
        description="Method that deserializes key/value properties.",
    )
    compare_function: str = Field(
        default="FStrEq",
        description="String-equality function guarding each key branch.",
    )
    key_name_identifier: str = Field(
        default="szKeyName",
        description="Identifier holding the current key name inside the method.",
    )


class MergeConfig(BaseModel):
    """How static hints take part in schema synthesis.

    Env vars:
        ENTSCHEMA__MERGE__HINT_POLICY: advisory or compatible
        ENTSCHEMA__MERGE__INHERITANCE: direct or transitive
    """

    hint_policy: HintPolicy = Field(
        default="advisory",
        description="advisory: hints are logged only. compatible: the narrowest hinted "
        "type that parses every observed value overrides the cascade.",
    )
    inheritance: InheritanceMode = Field(
        default="direct",
        description="Ancestor lookup for hints: one hop or full closure.",
    )


class NamingConfig(BaseModel):
    """Identifier rules of the downstream code generation backend."""

    grammar: IdentifierGrammar = "rust"


class OutputConfig(BaseModel):
    """Schema document output."""

    indent: int = Field(default=2, ge=0)
    format_command: list[str] | None = Field(
        default=None,
        description="External pretty-printer fed the document on stdin. "
        "A non-zero exit fails the run.",
    )


class EntSchemaConfig(BaseModel):
    """Root configuration for entschema."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    ingest: IngestConfig = Field(default_factory=IngestConfig)
    sdk: SdkConfig = Field(default_factory=SdkConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
