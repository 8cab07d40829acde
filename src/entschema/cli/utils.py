"""CLI utilities."""

from collections.abc import Iterator
from contextlib import contextmanager

import click

from entschema.config.models import EntSchemaConfig
from entschema.core.errors import EntSchemaError


def config_from_context(ctx: click.Context) -> EntSchemaConfig:
    """Resolved configuration stored on the root context by ``cli``."""
    config = ctx.find_root().ensure_object(dict).get("config")
    if not isinstance(config, EntSchemaConfig):
        raise click.ClickException("Configuration was not loaded")
    return config


@contextmanager
def reported_errors() -> Iterator[None]:
    """Convert hard entschema errors into a clean CLI failure (exit code 1)."""
    try:
        yield
    except EntSchemaError as e:
        raise click.ClickException(str(e)) from e
