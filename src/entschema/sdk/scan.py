"""Source tree scanning and hint persistence.

Walks an engine source tree, runs the HintExtractor on every source unit,
and concatenates per-unit results in path order. Unreadable units are
logged and skipped; they never abort the scan.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from entschema.config.models import SdkConfig
from entschema.core.errors import ConfigError, SourceError
from entschema.core.logging import get_logger
from entschema.core.progress import progress
from entschema.sdk.extractor import HintExtractor
from entschema.sdk.models import (
    EntityLink,
    HintList,
    InheritEdge,
    InheritList,
    LinkList,
    SourceHint,
)

log = get_logger("sdk.scan")

TYPES_FILE = "types.json"
INHERITS_FILE = "inherits.json"
CLASSES_FILE = "classes.json"


@dataclass(frozen=True, slots=True)
class SkippedSource:
    path: str
    error: str


@dataclass
class ScanResult:
    hints: list[SourceHint] = field(default_factory=list)
    inherits: list[InheritEdge] = field(default_factory=list)
    links: list[EntityLink] = field(default_factory=list)
    files_scanned: int = 0
    skipped: list[SkippedSource] = field(default_factory=list)


def discover_sources(root: Path, extensions: Iterable[str]) -> list[Path]:
    """All files under ``root`` with one of ``extensions``, sorted."""
    suffixes = {ext.lower() for ext in extensions}
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in suffixes)


def read_source(path: Path) -> str:
    """Read a source unit as strict UTF-8.

    Raises:
        SourceError: On I/O failure or invalid UTF-8.
    """
    try:
        return path.read_bytes().decode("utf-8")
    except OSError as e:
        raise SourceError.unreadable(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise SourceError.unreadable(str(path), f"not valid UTF-8 ({e.reason} at byte {e.start})") from e


def scan_files(paths: Iterable[Path], config: SdkConfig | None = None) -> ScanResult:
    extractor = HintExtractor(config)
    result = ScanResult()
    paths = list(paths)

    for path in progress(paths, desc="Scanning", unit="sources"):
        try:
            code = read_source(path)
        except SourceError as e:
            log.warning("source_skipped", path=str(path), error=e.message)
            result.skipped.append(SkippedSource(str(path), e.message))
            continue

        unit = extractor.extract(code)
        result.files_scanned += 1
        if unit.empty:
            continue
        log.debug(
            "source_extracted",
            path=str(path),
            hints=len(unit.hints),
            inherits=len(unit.inherits),
            links=len(unit.links),
        )
        result.hints.extend(unit.hints)
        result.inherits.extend(unit.inherits)
        result.links.extend(unit.links)

    log.info(
        "sdk_scanned",
        files=result.files_scanned,
        skipped=len(result.skipped),
        hints=len(result.hints),
        inherits=len(result.inherits),
        links=len(result.links),
    )
    return result


def scan_tree(root: Path, config: SdkConfig | None = None) -> ScanResult:
    config = config or SdkConfig()
    return scan_files(discover_sources(root, config.source_extensions), config)


def dump_hints(hints: list[SourceHint]) -> bytes:
    return HintList.dump_json(hints, by_alias=True, indent=1)


def dump_inherits(inherits: list[InheritEdge]) -> bytes:
    return InheritList.dump_json(inherits, by_alias=True, indent=1)


def dump_links(links: list[EntityLink]) -> bytes:
    return LinkList.dump_json(links, by_alias=True, indent=1)


def export_scan(result: ScanResult, out_dir: Path) -> None:
    """Write types.json, inherits.json and classes.json into ``out_dir``."""
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / TYPES_FILE).write_bytes(dump_hints(result.hints) + b"\n")
    (out_dir / INHERITS_FILE).write_bytes(dump_inherits(result.inherits) + b"\n")
    (out_dir / CLASSES_FILE).write_bytes(dump_links(result.links) + b"\n")


def load_scan(data_dir: Path) -> ScanResult:
    """Load a previously exported scan. Missing files load as empty.

    Raises:
        ConfigError: If a present file is not a valid export.
    """

    def read(name: str, adapter: TypeAdapter[list[Any]]) -> list[Any]:
        path = data_dir / name
        if not path.exists():
            return []
        try:
            return adapter.validate_json(path.read_bytes())
        except ValidationError as e:
            raise ConfigError.parse_error(str(path), str(e.errors()[0]["msg"])) from e

    return ScanResult(
        hints=read(TYPES_FILE, HintList),
        inherits=read(INHERITS_FILE, InheritList),
        links=read(CLASSES_FILE, LinkList),
    )
