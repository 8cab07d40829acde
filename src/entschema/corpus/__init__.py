"""Entity corpus: map decoding and per-class aggregation."""

from entschema.corpus.entities import Entity, decode_entities, decode_file, parse_entity_text
from entschema.corpus.ingest import (
    ClassAccumulator,
    IngestReport,
    IngestResult,
    ObservedClass,
    available_parallelism,
    decode_maps,
    ingest,
)

__all__ = [
    "ClassAccumulator",
    "Entity",
    "IngestReport",
    "IngestResult",
    "ObservedClass",
    "available_parallelism",
    "decode_entities",
    "decode_file",
    "decode_maps",
    "ingest",
    "parse_entity_text",
]
