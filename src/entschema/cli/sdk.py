"""entschema sdk - static hint extraction from engine source."""

from pathlib import Path

import click

from entschema.cli.utils import config_from_context, reported_errors
from entschema.core.progress import pluralize, status
from entschema.sdk.scan import dump_hints, dump_inherits, dump_links, export_scan, scan_tree


@click.group("sdk")
def sdk_group() -> None:
    """Static analysis of engine source text."""


@sdk_group.command("scan")
@click.argument("sdk_path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--mode",
    type=click.Choice(["types", "inherits", "classes"]),
    required=True,
    help="Which result set to print",
)
@click.option(
    "-o",
    "--output-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout",
)
@click.pass_context
def scan_command(
    ctx: click.Context, sdk_path: Path, mode: str, output_file: Path | None
) -> None:
    """Extract type hints, inheritance or entity links from SDK_PATH as JSON."""
    config = config_from_context(ctx)
    with reported_errors():
        result = scan_tree(sdk_path, config.sdk)

    if mode == "types":
        payload = dump_hints(result.hints)
    elif mode == "inherits":
        payload = dump_inherits(result.inherits)
    else:
        payload = dump_links(result.links)

    if output_file is None:
        click.echo(payload.decode("utf-8"))
    else:
        output_file.write_bytes(payload + b"\n")
        status(f"Wrote {mode} to {output_file}", style="success")


@sdk_group.command("export")
@click.argument("sdk_path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("out_dir", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def export_command(ctx: click.Context, sdk_path: Path, out_dir: Path) -> None:
    """Scan SDK_PATH and write types.json, inherits.json and classes.json to OUT_DIR."""
    config = config_from_context(ctx)
    with reported_errors():
        result = scan_tree(sdk_path, config.sdk)
    export_scan(result, out_dir)
    status(
        f"{pluralize(len(result.hints), 'hint')}, {pluralize(len(result.inherits), 'class', 'classes')} "
        f"with bases, {pluralize(len(result.links), 'entity link')} -> {out_dir}",
        style="success",
    )
    if result.skipped:
        status(f"{pluralize(len(result.skipped), 'source file')} skipped", style="warning")
