"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of entschema modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("entschema"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Each test starts from structlog's default (unfiltered) configuration."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


def entity_text(*entities: dict[str, str] | list[tuple[str, str]]) -> str:
    """Render entities in the map entity-lump text format."""
    blocks = []
    for entity in entities:
        pairs = entity.items() if isinstance(entity, dict) else entity
        body = "".join(f'"{key}" "{value}"\n' for key, value in pairs)
        blocks.append("{\n" + body + "}\n")
    return "".join(blocks)


@pytest.fixture
def write_map(tmp_path: Path):
    """Write entities as a plain entity-text map file and return its path."""

    def _write(name: str, *entities: dict[str, str] | list[tuple[str, str]]) -> Path:
        path = tmp_path / name
        path.write_text(entity_text(*entities), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def render_entities():
    """The entity-lump text renderer, for tests that need raw bytes."""
    return entity_text
