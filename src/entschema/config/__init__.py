"""Config module exports."""

from entschema.config.loader import load_config
from entschema.config.models import (
    EntSchemaConfig,
    IngestConfig,
    LoggingConfig,
    MergeConfig,
    NamingConfig,
    OutputConfig,
    SdkConfig,
)

__all__ = [
    "load_config",
    "EntSchemaConfig",
    "IngestConfig",
    "LoggingConfig",
    "MergeConfig",
    "NamingConfig",
    "OutputConfig",
    "SdkConfig",
]
