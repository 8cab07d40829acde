"""Entity model and the map-file decoder boundary.

A map file decodes to a list of entities; each entity is an ordered list of
``(key, value)`` string pairs. Two inputs are understood:

- Compiled ``VBSP`` maps. The entity lump (lump 0) holds the entity text,
  optionally LZMA-compressed with the engine's 17-byte lump header.
- Plain entity text (``{ "key" "value" ... }`` blocks), as dumped by map tools.

Anything else raises :class:`DecodeError`; the ingestor treats that as a
per-file soft failure.
"""

from __future__ import annotations

import lzma
import re
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from entschema.core.errors import DecodeError

VBSP_MAGIC = b"VBSP"
LUMP_COUNT = 64
ENTITY_LUMP = 0

_HEADER = struct.Struct("<4si")
_LUMP = struct.Struct("<iii4s")
HEADER_SIZE = _HEADER.size + LUMP_COUNT * _LUMP.size + 4  # trailing map revision

LZMA_MAGIC = b"LZMA"
_LZMA_HEADER = struct.Struct("<4sII5s")

_TOKEN_RE = re.compile(r'\s*(?:([{}])|"([^"]*)"|(\x00+)|(\S))')


@dataclass(frozen=True, slots=True)
class Entity:
    """One placed entity: ordered key/value pairs, duplicates preserved."""

    properties: tuple[tuple[str, str], ...]

    def prop(self, key: str) -> str | None:
        """First value stored under ``key``, or None."""
        for name, value in self.properties:
            if name == key:
                return value
        return None

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.properties)


def parse_entity_text(text: str) -> list[Entity]:
    """Parse an entity lump's text into entities."""
    entities: list[Entity] = []
    pairs: list[tuple[str, str]] | None = None
    key: str | None = None
    pos = 0

    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            # only trailing whitespace remains
            break
        brace, string, nul, stray = match.groups()
        start = match.start(match.lastindex or 0)
        pos = match.end()

        if nul is not None:
            if pairs is not None:
                raise DecodeError.malformed_entities(start, "terminator inside an entity")
            break
        if stray is not None:
            raise DecodeError.malformed_entities(start, f"unexpected character {stray!r}")
        if brace == "{":
            if pairs is not None:
                raise DecodeError.malformed_entities(start, "nested '{'")
            pairs = []
        elif brace == "}":
            if pairs is None:
                raise DecodeError.malformed_entities(start, "'}' without matching '{'")
            if key is not None:
                raise DecodeError.malformed_entities(start, f"key {key!r} has no value")
            entities.append(Entity(tuple(pairs)))
            pairs = None
        else:
            if pairs is None:
                raise DecodeError.malformed_entities(start, "string outside an entity")
            if key is None:
                key = string
            else:
                pairs.append((key, string or ""))
                key = None

    if pairs is not None:
        raise DecodeError.malformed_entities(len(text), "unterminated entity")
    return entities


def _decompress_lump(data: bytes) -> bytes:
    if len(data) < _LZMA_HEADER.size:
        raise DecodeError.bad_lump(ENTITY_LUMP, "LZMA header truncated")
    _magic, actual_size, lzma_size, props = _LZMA_HEADER.unpack_from(data)
    payload = data[_LZMA_HEADER.size : _LZMA_HEADER.size + lzma_size]
    # Rebuild the .lzma "alone" header: properties + 64-bit uncompressed size
    alone = props + struct.pack("<Q", actual_size) + payload
    try:
        raw = lzma.LZMADecompressor(format=lzma.FORMAT_ALONE).decompress(alone, actual_size)
    except lzma.LZMAError as e:
        raise DecodeError.bad_lump(ENTITY_LUMP, f"LZMA: {e}") from e
    if len(raw) != actual_size:
        raise DecodeError.bad_lump(
            ENTITY_LUMP, f"LZMA payload yields {len(raw)} of {actual_size} bytes"
        )
    return raw


def read_entity_lump(data: bytes) -> bytes:
    """Return the raw (decompressed) entity lump of a VBSP file."""
    if len(data) < HEADER_SIZE:
        raise DecodeError.truncated(HEADER_SIZE, len(data))
    magic, _version = _HEADER.unpack_from(data)
    if magic != VBSP_MAGIC:
        raise DecodeError.bad_magic(magic)

    offset, length, _lump_version, _four_cc = _LUMP.unpack_from(
        data, _HEADER.size + ENTITY_LUMP * _LUMP.size
    )
    if offset < 0 or length < 0 or offset + length > len(data):
        raise DecodeError.bad_lump(ENTITY_LUMP, f"range {offset}+{length} outside file")

    lump = data[offset : offset + length]
    if lump.startswith(LZMA_MAGIC):
        lump = _decompress_lump(lump)
    return lump


def decode_entities(data: bytes) -> list[Entity]:
    """Decode a map file's bytes into its entity list."""
    if data.startswith(VBSP_MAGIC):
        lump = read_entity_lump(data)
    elif data.lstrip().startswith(b"{"):
        lump = data
    else:
        raise DecodeError.bad_magic(data[:4])
    return parse_entity_text(lump.decode("utf-8", errors="replace"))


def decode_file(path: Path) -> list[Entity]:
    """Read and decode one map file."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError.io(str(path), e.strerror or str(e)) from e
    return decode_entities(data)
