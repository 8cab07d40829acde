"""Schema document rendering and the external formatter boundary."""

from __future__ import annotations

import subprocess
from pathlib import Path

from entschema.core.errors import OutputError
from entschema.core.logging import get_logger
from entschema.schema.models import SchemaDocument

log = get_logger("emit")


def render_document(document: SchemaDocument, indent: int = 2) -> str:
    """Deterministic JSON text for ``document``, newline-terminated."""
    return document.model_dump_json(indent=indent or None) + "\n"


def run_formatter(command: list[str], text: str) -> str:
    """Pipe ``text`` through an external formatter and return its stdout.

    Raises:
        OutputError: If the process cannot start or exits non-zero.
    """
    try:
        completed = subprocess.run(
            command,
            input=text,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise OutputError.formatter_missing(command, e.strerror or str(e)) from e
    if completed.returncode != 0:
        raise OutputError.formatter_failed(command, completed.returncode, completed.stderr)
    return completed.stdout


def write_document(
    document: SchemaDocument,
    dest: Path,
    *,
    indent: int = 2,
    format_command: list[str] | None = None,
) -> None:
    text = render_document(document, indent)
    if format_command:
        text = run_formatter(format_command, text)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(text, encoding="utf-8")
    log.info("schema_written", path=str(dest), classes=len(document.classes), bytes=len(text))
