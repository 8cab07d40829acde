"""entschema CLI."""

from pathlib import Path

import click

from entschema import __version__
from entschema.cli.generate import generate_command
from entschema.cli.sdk import sdk_group
from entschema.config.loader import load_config
from entschema.core.errors import EntSchemaError
from entschema.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="entschema")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ./entschema.yaml when present)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """entschema - infer entity property schemas from maps and engine source."""
    ctx.ensure_object(dict)
    overrides = {"logging": {"level": "DEBUG"}} if verbose else {}
    try:
        config = load_config(config_path, **overrides)
    except EntSchemaError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["config"] = config
    configure_logging(config=config.logging)


cli.add_command(generate_command, name="generate")
cli.add_command(sdk_group, name="sdk")


if __name__ == "__main__":
    cli()
