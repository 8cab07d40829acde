"""Core module exports."""

from entschema.core.errors import (
    ConfigError,
    DecodeError,
    EntSchemaError,
    ErrorCode,
    InternalError,
    OutputError,
    SourceError,
)
from entschema.core.logging import (
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)
from entschema.core.progress import progress, status, task

__all__ = [
    # Errors
    "ConfigError",
    "DecodeError",
    "EntSchemaError",
    "ErrorCode",
    "InternalError",
    "OutputError",
    "SourceError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    # Progress
    "progress",
    "status",
    "task",
]
