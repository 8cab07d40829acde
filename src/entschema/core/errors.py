"""entschema error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Corpus (map decoding)
- 4xxx: SDK (source scanning)
- 5xxx: Output
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Corpus (3xxx)
    DECODE_BAD_MAGIC = 3001
    DECODE_TRUNCATED = 3002
    DECODE_BAD_LUMP = 3003
    DECODE_MALFORMED_ENTITIES = 3004
    DECODE_IO = 3005

    # SDK (4xxx)
    SOURCE_UNREADABLE = 4001

    # Output (5xxx)
    FORMATTER_FAILED = 5001
    FORMATTER_MISSING = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    PARALLELISM_UNAVAILABLE = 9003


@dataclass(frozen=True, slots=True)
class EntSchemaError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'DECODE_BAD_MAGIC')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON reports."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"

    def __reduce__(self) -> tuple[Any, ...]:
        # Exception pickling replays self.args, which the dataclass init leaves empty
        return (type(self), (self.code, self.message, self.details))


class ConfigError(EntSchemaError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class DecodeError(EntSchemaError):
    """A single map file could not be decoded into entities.

    Always soft at the ingestor level: the file is reported and dropped.
    """

    @classmethod
    def bad_magic(cls, magic: bytes) -> "DecodeError":
        return cls(
            code=ErrorCode.DECODE_BAD_MAGIC,
            message=f"Unrecognized map header {magic!r}",
            details={"magic": magic.hex()},
        )

    @classmethod
    def truncated(cls, expected: int, actual: int) -> "DecodeError":
        return cls(
            code=ErrorCode.DECODE_TRUNCATED,
            message=f"File truncated: need {expected} bytes, have {actual}",
            details={"expected": expected, "actual": actual},
        )

    @classmethod
    def bad_lump(cls, index: int, reason: str) -> "DecodeError":
        return cls(
            code=ErrorCode.DECODE_BAD_LUMP,
            message=f"Invalid lump {index}: {reason}",
            details={"lump": index, "reason": reason},
        )

    @classmethod
    def malformed_entities(cls, offset: int, reason: str) -> "DecodeError":
        return cls(
            code=ErrorCode.DECODE_MALFORMED_ENTITIES,
            message=f"Malformed entity text at offset {offset}: {reason}",
            details={"offset": offset, "reason": reason},
        )

    @classmethod
    def io(cls, path: str, reason: str) -> "DecodeError":
        return cls(
            code=ErrorCode.DECODE_IO,
            message=f"Unable to read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SourceError(EntSchemaError):
    """A source text unit could not be read."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_UNREADABLE,
            message=f"Unable to read source file {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class OutputError(EntSchemaError):
    """Errors at the schema output boundary. These abort the run."""

    @classmethod
    def formatter_failed(cls, command: list[str], returncode: int, stderr: str) -> "OutputError":
        return cls(
            code=ErrorCode.FORMATTER_FAILED,
            message=f"Formatter {command[0]!r} exited with status {returncode}",
            details={"command": command, "returncode": returncode, "stderr": stderr},
        )

    @classmethod
    def formatter_missing(cls, command: list[str], reason: str) -> "OutputError":
        return cls(
            code=ErrorCode.FORMATTER_MISSING,
            message=f"Unable to start formatter {command[0]!r}: {reason}",
            details={"command": command, "reason": reason},
        )


class InternalError(EntSchemaError):
    """Internal/unexpected errors."""

    @classmethod
    def parallelism_unavailable(cls) -> "InternalError":
        return cls(
            code=ErrorCode.PARALLELISM_UNAVAILABLE,
            message="Unable to determine available parallelism of the host",
        )

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
