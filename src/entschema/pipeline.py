"""End-to-end run: corpus ingestion + optional static hints -> schema document."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from entschema.config.models import EntSchemaConfig
from entschema.core.logging import get_logger, set_run_id
from entschema.corpus.entities import decode_file
from entschema.corpus.ingest import Decoder, IngestReport, ingest
from entschema.schema.merge import synthesize
from entschema.schema.models import SchemaDocument
from entschema.sdk.index import SdkIndex
from entschema.sdk.scan import ScanResult

log = get_logger("pipeline")


@dataclass(frozen=True, slots=True)
class PipelineResult:
    document: SchemaDocument
    report: IngestReport


def expand_inputs(inputs: Iterable[Path], extensions: Iterable[str]) -> list[Path]:
    """Files as given; directories expanded to their map files (sorted)."""
    suffixes = {ext.lower() for ext in extensions}
    paths: list[Path] = []
    for item in inputs:
        if item.is_dir():
            paths.extend(
                sorted(p for p in item.rglob("*") if p.is_file() and p.suffix.lower() in suffixes)
            )
        else:
            paths.append(item)
    return paths


def build_index(scan: ScanResult | None, config: EntSchemaConfig) -> SdkIndex | None:
    if scan is None:
        return None
    return SdkIndex(
        links=scan.links,
        inherits=scan.inherits,
        hints=scan.hints,
        inheritance=config.merge.inheritance,
    )


def run_pipeline(
    inputs: Iterable[Path],
    config: EntSchemaConfig,
    *,
    scan: ScanResult | None = None,
    decoder: Decoder = decode_file,
) -> PipelineResult:
    run_id = set_run_id()
    paths = expand_inputs(inputs, config.ingest.map_extensions)
    log.info("pipeline_start", run_id=run_id, maps=len(paths), hints=scan is not None)

    corpus = ingest(
        paths,
        decoder=decoder,
        max_workers=config.ingest.max_workers,
        executor=config.ingest.executor,
        excluded=config.ingest.excluded_properties,
    )
    document = synthesize(
        corpus.classes,
        build_index(scan, config),
        hint_policy=config.merge.hint_policy,
        grammar=config.naming.grammar,
    )
    return PipelineResult(document=document, report=corpus.report)
