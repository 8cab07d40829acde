"""CLI test isolation: no user or project config, no leaked log handlers."""

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    with patch("entschema.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield workdir
    for handler in logging.getLogger().handlers:
        handler.close()
    logging.getLogger().handlers.clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def quiet_env() -> dict[str, str]:
    """Keep log lines off the captured output."""
    return {"ENTSCHEMA__LOGGING__LEVEL": "ERROR"}
