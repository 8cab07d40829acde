"""Schema synthesis and emission."""

from entschema.schema.emit import render_document, run_formatter, write_document
from entschema.schema.merge import resolve_type, synthesize, synthesize_class
from entschema.schema.models import ClassSchema, PropertySchema, SchemaDocument

__all__ = [
    "ClassSchema",
    "PropertySchema",
    "SchemaDocument",
    "render_document",
    "resolve_type",
    "run_formatter",
    "synthesize",
    "synthesize_class",
    "write_document",
]
