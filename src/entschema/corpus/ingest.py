"""Entity corpus ingestion.

Decodes map files on a bounded window of concurrent workers, then aggregates
every entity's key/value strings per classname on the calling thread.

Design:
- At most ``max_workers`` decodes are in flight. When the window is full the
  coordinator blocks on the OLDEST in-flight decode before admitting another.
- Workers own their decoded entity lists; nothing is shared while they run.
- The ClassAccumulator is created only after every worker has joined and is
  owned by the aggregating thread alone.
- A file that fails to decode is logged and dropped. Entities without a
  classname and properties with an empty name are logged and skipped.
"""

from __future__ import annotations

import os
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from entschema.core.errors import DecodeError, InternalError
from entschema.core.logging import get_logger
from entschema.core.progress import progress
from entschema.corpus.entities import Entity, decode_file

log = get_logger("ingest")

CLASSNAME_KEY = "classname"
DEFAULT_EXCLUDED = ("classname", "hammerid")

Decoder = Callable[[Path], list[Entity]]


@dataclass(frozen=True, slots=True)
class ObservedClass:
    """Frozen aggregate of every instance seen for one classname.

    ``properties[name]`` holds the raw values in encounter order; a property
    missing from an instance contributes nothing. A key repeated within one
    entity (output connections such as ``OnTrigger``) contributes every value,
    so ``present[name]`` counts the instances carrying the key instead.
    """

    name: str
    occurrences: int
    properties: dict[str, tuple[str, ...]]
    present: dict[str, int]

    def is_optional(self, prop: str) -> bool:
        """Whether some instance of this class lacks ``prop``."""
        return self.present.get(prop, 0) < self.occurrences


@dataclass(frozen=True, slots=True)
class IngestFailure:
    path: str
    error: str


@dataclass
class IngestReport:
    files_total: int = 0
    files_decoded: int = 0
    entities_seen: int = 0
    entities_skipped: int = 0
    properties_skipped: int = 0
    failures: list[IngestFailure] = field(default_factory=list)


@dataclass
class _ClassBuilder:
    occurrences: int = 0
    values: dict[str, list[str]] = field(default_factory=dict)
    present: dict[str, int] = field(default_factory=dict)


class ClassAccumulator:
    """Single-owner aggregation of entities into ObservedClass records."""

    def __init__(
        self,
        excluded: Iterable[str] = DEFAULT_EXCLUDED,
        report: IngestReport | None = None,
    ) -> None:
        self._excluded = frozenset(excluded) | {CLASSNAME_KEY}
        self._classes: dict[str, _ClassBuilder] = {}
        self.report = report or IngestReport()

    def add(self, entity: Entity, source: str | None = None) -> None:
        self.report.entities_seen += 1
        classname = entity.prop(CLASSNAME_KEY)
        if classname is None:
            log.warning("entity_missing_classname", source=source, entity=list(entity))
            self.report.entities_skipped += 1
            return
        if classname == "":
            log.warning("entity_empty_classname", source=source, entity=list(entity))
            self.report.entities_skipped += 1
            return

        builder = self._classes.setdefault(classname, _ClassBuilder())
        builder.occurrences += 1
        seen: set[str] = set()
        for name, value in entity:
            if name in self._excluded:
                continue
            if name == "":
                log.warning("property_empty_name", classname=classname, value=value, source=source)
                self.report.properties_skipped += 1
                continue
            builder.values.setdefault(name, []).append(value)
            if name not in seen:
                seen.add(name)
                builder.present[name] = builder.present.get(name, 0) + 1

    def add_all(self, entities: Iterable[Entity], source: str | None = None) -> None:
        for entity in entities:
            self.add(entity, source)

    def freeze(self) -> dict[str, ObservedClass]:
        return {
            name: ObservedClass(
                name=name,
                occurrences=builder.occurrences,
                properties={prop: tuple(values) for prop, values in builder.values.items()},
                present=dict(builder.present),
            )
            for name, builder in self._classes.items()
        }


@dataclass(frozen=True, slots=True)
class IngestResult:
    classes: dict[str, ObservedClass]
    report: IngestReport


def available_parallelism() -> int:
    """Number of CPUs usable by this process.

    Raises:
        InternalError: If the host does not report it (fatal for the run).
    """
    count: int | None
    if hasattr(os, "process_cpu_count"):
        count = os.process_cpu_count()
    elif hasattr(os, "sched_getaffinity"):
        count = len(os.sched_getaffinity(0))
    else:
        count = os.cpu_count()
    if not count:
        raise InternalError.parallelism_unavailable()
    return count


def _make_executor(kind: Literal["thread", "process"], workers: int) -> Executor:
    if kind == "process":
        return ProcessPoolExecutor(max_workers=workers)
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="entschema-decode")


def decode_maps(
    paths: Sequence[Path],
    *,
    decoder: Decoder = decode_file,
    max_workers: int | None = None,
    executor: Literal["thread", "process"] = "thread",
    report: IngestReport | None = None,
) -> list[tuple[Path, list[Entity]]]:
    """Decode ``paths`` concurrently, returning successes in input order."""
    report = report if report is not None else IngestReport()
    limit = max_workers or available_parallelism()
    report.files_total += len(paths)
    decoded: list[tuple[Path, list[Entity]]] = []
    window: deque[tuple[Path, Future[list[Entity]]]] = deque()

    def join(path: Path, future: Future[list[Entity]]) -> None:
        try:
            entities = future.result()
        except DecodeError as e:
            log.warning("map_decode_failed", path=str(path), error=str(e))
            report.failures.append(IngestFailure(str(path), str(e)))
            return
        except Exception as e:
            error = InternalError.unexpected(repr(e), path=str(path))
            log.warning("map_decode_failed", path=str(path), error=str(error), exc_info=True)
            report.failures.append(IngestFailure(str(path), str(error)))
            return
        report.files_decoded += 1
        decoded.append((path, entities))

    with _make_executor(executor, limit) as pool:
        for path in progress(paths, desc="Decoding", unit="maps"):
            if len(window) >= limit:
                join(*window.popleft())
            window.append((path, pool.submit(decoder, path)))
        while window:
            join(*window.popleft())

    log.info(
        "maps_decoded",
        decoded=report.files_decoded,
        failed=len(report.failures),
        workers=limit,
    )
    return decoded


def ingest(
    paths: Sequence[Path],
    *,
    decoder: Decoder = decode_file,
    max_workers: int | None = None,
    executor: Literal["thread", "process"] = "thread",
    excluded: Iterable[str] = DEFAULT_EXCLUDED,
) -> IngestResult:
    """Decode every map and aggregate its entities per classname."""
    report = IngestReport()
    decoded = decode_maps(
        paths,
        decoder=decoder,
        max_workers=max_workers,
        executor=executor,
        report=report,
    )

    accumulator = ClassAccumulator(excluded, report)
    for path, entities in decoded:
        accumulator.add_all(entities, source=str(path))
    classes = accumulator.freeze()

    log.info(
        "corpus_aggregated",
        classes=len(classes),
        entities=report.entities_seen,
        skipped_entities=report.entities_skipped,
        skipped_properties=report.properties_skipped,
    )
    return IngestResult(classes=classes, report=report)
