"""Tests for CLI utilities."""

from __future__ import annotations

import click
import pytest

from entschema.cli.utils import config_from_context, reported_errors
from entschema.config.models import EntSchemaConfig
from entschema.core.errors import DecodeError


class TestConfigFromContext:
    def test_returns_config_from_root_context(self) -> None:
        config = EntSchemaConfig()
        root = click.Context(click.Command("root"), obj={"config": config})
        child = click.Context(click.Command("child"), parent=root)

        assert config_from_context(child) is config

    def test_raises_when_not_loaded(self) -> None:
        ctx = click.Context(click.Command("root"))
        with pytest.raises(click.ClickException, match="not loaded"):
            config_from_context(ctx)


class TestReportedErrors:
    def test_converts_entschema_errors(self) -> None:
        with pytest.raises(click.ClickException) as exc_info, reported_errors():
            raise DecodeError.bad_magic(b"XXXX")

        assert "DECODE_BAD_MAGIC" in exc_info.value.message

    def test_other_errors_propagate(self) -> None:
        with pytest.raises(ValueError), reported_errors():
            raise ValueError("unrelated")
