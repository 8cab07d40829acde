"""entschema generate - infer schemas from map files."""

from pathlib import Path

import click

from entschema.cli.utils import config_from_context, reported_errors
from entschema.core.progress import pluralize, status, task
from entschema.pipeline import run_pipeline
from entschema.schema.emit import write_document
from entschema.sdk.scan import ScanResult, load_scan, scan_tree


@click.command("generate")
@click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "-o",
    "--output-file",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Schema document to write",
)
@click.option(
    "--sdk",
    "sdk_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Engine source tree to scan for static hints",
)
@click.option(
    "--sdk-data",
    "sdk_data",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory with types.json/inherits.json/classes.json from 'sdk export'",
)
@click.option(
    "--hint-policy",
    type=click.Choice(["advisory", "compatible"]),
    default=None,
    help="How static hints affect types (default from config)",
)
@click.option(
    "--inheritance",
    type=click.Choice(["direct", "transitive"]),
    default=None,
    help="Ancestor lookup for static hints (default from config)",
)
@click.option(
    "--grammar",
    type=click.Choice(["rust", "python"]),
    default=None,
    help="Identifier grammar of the code generation backend",
)
@click.option("-j", "--workers", type=click.IntRange(min=1), default=None, help="Decode workers")
@click.pass_context
def generate_command(
    ctx: click.Context,
    inputs: tuple[Path, ...],
    output_file: Path,
    sdk_path: Path | None,
    sdk_data: Path | None,
    hint_policy: str | None,
    inheritance: str | None,
    grammar: str | None,
    workers: int | None,
) -> None:
    """Generate entity schemas for INPUTS (map files or directories of maps)."""
    if sdk_path is not None and sdk_data is not None:
        raise click.UsageError("--sdk and --sdk-data are mutually exclusive")

    config = config_from_context(ctx)
    updates: dict[str, dict[str, object]] = {
        "merge": {"hint_policy": hint_policy, "inheritance": inheritance},
        "naming": {"grammar": grammar},
        "ingest": {"max_workers": workers},
    }
    config = config.model_copy(
        update={
            section: getattr(config, section).model_copy(
                update={k: v for k, v in values.items() if v is not None}
            )
            for section, values in updates.items()
        }
    )

    with reported_errors():
        scan: ScanResult | None = None
        if sdk_path is not None:
            with task("Scanning engine source"):
                scan = scan_tree(sdk_path, config.sdk)
        elif sdk_data is not None:
            scan = load_scan(sdk_data)

        with task("Inferring schemas"):
            result = run_pipeline(inputs, config, scan=scan)

        with task("Writing schema document"):
            write_document(
                result.document,
                output_file,
                indent=config.output.indent,
                format_command=config.output.format_command,
            )

    report = result.report
    if report.failures:
        status(f"{pluralize(len(report.failures), 'map')} failed to decode", style="warning")
    status(
        f"{pluralize(len(result.document.classes), 'class', 'classes')} from "
        f"{pluralize(report.files_decoded, 'map')} -> {output_file}",
        style="success",
    )
